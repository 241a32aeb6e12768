"""
FSO channel.

The channel owns the attached phys, the ordered loss model chain and the
propagation delay model. A transmission is passed through the chain once per
receiving phy and delivered after the propagation delay.
"""

import logging
from typing import List, Optional, Set

from .delay import ConstantSpeedPropagationDelayModel
from .errors import ConfigurationError
from .loss_models import PropagationLossModel
from .scheduler import Event, Simulator
from .signal import Packet, SignalParameters

logger = logging.getLogger(__name__)


class FsoChannel:
    """
    Point-to-point optical channel.

    The phy list and the loss chain are built before the first send; after
    that the channel refuses structural changes.
    """

    def __init__(
        self,
        simulator: Simulator,
        delay_model: Optional[ConstantSpeedPropagationDelayModel] = None
    ):
        self.simulator = simulator
        self._phys: List = []
        self._loss_models: List[PropagationLossModel] = []
        self._delay_model = delay_model
        self._started = False

    def _check_mutable(self):
        if self._started:
            raise ConfigurationError("Channel cannot be reconfigured after the first transmission")

    def set_propagation_delay_model(self, delay_model: ConstantSpeedPropagationDelayModel):
        self._check_mutable()
        self._delay_model = delay_model

    def add_propagation_loss_model(self, model: PropagationLossModel):
        """Append a loss model; models run in the order they were added."""
        self._check_mutable()
        self._loss_models.append(model)

    @property
    def loss_models(self) -> List[PropagationLossModel]:
        return list(self._loss_models)

    def add(self, phy):
        """
        Attach a phy to this channel.

        A phy belongs to exactly one channel, so it is detached from any
        previous channel first. Attaching the same phy twice is a no-op.
        """
        self._check_mutable()
        if phy in self._phys:
            return
        previous = phy.get_channel()
        if previous is not None and previous is not self:
            previous.remove(phy)
        self._phys.append(phy)
        phy._bind_channel(self)

    attach = add

    def remove(self, phy):
        """Detach a phy; it is left without a channel."""
        self._check_mutable()
        self._phys.remove(phy)
        phy._bind_channel(None)

    def get_n_devices(self) -> int:
        return len(self._phys)

    def get_phy(self, index: int):
        return self._phys[index]

    def provided_fields(self) -> Set[str]:
        """Union of the SignalParameters fields written by the loss chain."""
        provided: Set[str] = set()
        for model in self._loss_models:
            provided |= model.provides
        return provided

    def validate(self):
        """
        Check the setup before the simulation runs.

        Raises:
            ConfigurationError: if the delay model is missing, a phy is
                misconfigured, or an error model needs fields the chain
                does not produce
        """
        if self._delay_model is None:
            raise ConfigurationError("Channel has no propagation delay model")

        provided = self.provided_fields()

        for phy in self._phys:
            phy.validate()
            error_model = phy.get_error_model()
            if error_model is None:
                continue
            missing = set(error_model.requires) - provided
            if missing:
                raise ConfigurationError(
                    f"Error model of {phy!r} requires {sorted(missing)} "
                    f"but the loss chain only provides {sorted(provided)}"
                )

    def compute_rx_params(self, params: SignalParameters, tx_phy, rx_phy) -> SignalParameters:
        """
        Run the loss chain for one tx/rx pair.

        The result only depends on the input parameters, the two positions and
        the configuration of the models.
        """
        tx_mobility = tx_phy.get_mobility()
        rx_mobility = rx_phy.get_mobility()
        rx_params = params.copy()
        for model in self._loss_models:
            rx_params = model.apply(rx_params, tx_mobility, rx_mobility)
        return rx_params

    def send(self, from_phy, packet: Packet, params: SignalParameters) -> List[Event]:
        """
        Deliver a transmission to every other attached phy.

        Args:
            from_phy: Transmitting phy
            packet: Packet carried by the transmission
            params: Transmit-side signal parameters

        Returns:
            Scheduled delivery events, one per receiving phy
        """
        if self._delay_model is None:
            raise ConfigurationError("Channel has no propagation delay model")
        self._started = True

        events = []
        for phy in self._phys:
            if phy is from_phy:
                continue

            rx_params = self.compute_rx_params(params, from_phy, phy)
            delay = self._delay_model.get_delay(from_phy.get_mobility(), phy.get_mobility())
            event = self.simulator.schedule(delay, phy.receive, packet.copy(), rx_params)
            events.append(event)

            logger.info(
                f"Packet {packet.uid} scheduled for {phy!r} at "
                f"t={self.simulator.now + delay:.6e} s (delay {delay:.6e} s)"
            )

        if not events:
            logger.debug(f"Packet {packet.uid} from {from_phy!r} has no receivers")
        return events
