"""
Propagation delay models.
"""

from .errors import ConfigurationError
from .mobility import ConstantPositionMobility
from .signal import SPEED_OF_LIGHT


class ConstantSpeedPropagationDelayModel:
    """Delay equal to the line-of-sight distance divided by a constant speed."""

    def __init__(self, speed: float = SPEED_OF_LIGHT):
        if speed <= 0:
            raise ConfigurationError("Propagation speed must be positive")
        self.speed = speed

    def get_delay(
        self,
        tx_mobility: ConstantPositionMobility,
        rx_mobility: ConstantPositionMobility
    ) -> float:
        """
        Compute the propagation delay between two endpoints.

        Returns:
            Delay in seconds (0 for co-located endpoints)
        """
        return tx_mobility.distance_from(rx_mobility) / self.speed
