"""
FSO link simulation core.

This module contains the discrete-event link model including:
- Signal parameters and packets
- Virtual-time scheduler
- Mobility, antenna and propagation delay models
- Propagation loss models (free space, scintillation index, mean irradiance)
- FsoChannel, FsoPhy and FsoErrorModel
- DownlinkScenario main class
"""

from .antenna import LaserAntenna, OpticalRxAntenna
from .channel import FsoChannel
from .core import DownlinkScenario, LinkConfig, LinkResult
from .delay import ConstantSpeedPropagationDelayModel
from .error_model import FsoErrorModel, gamma_gamma_parameters
from .errors import ConfigurationError, FsoSimError, SchedulingError
from .loss_models import (
    DownLinkScintillationIndexModel,
    FreeSpaceLossModel,
    MeanIrradianceModel,
    PropagationLossModel,
)
from .mobility import ConstantPositionMobility
from .phy import FsoPhy, PhyRole, PhyStats
from .scheduler import Event, Simulator
from .signal import SPEED_OF_LIGHT, Packet, SignalParameters

__all__ = [
    "LaserAntenna",
    "OpticalRxAntenna",
    "FsoChannel",
    "DownlinkScenario",
    "LinkConfig",
    "LinkResult",
    "ConstantSpeedPropagationDelayModel",
    "FsoErrorModel",
    "gamma_gamma_parameters",
    "ConfigurationError",
    "FsoSimError",
    "SchedulingError",
    "DownLinkScintillationIndexModel",
    "FreeSpaceLossModel",
    "MeanIrradianceModel",
    "PropagationLossModel",
    "ConstantPositionMobility",
    "FsoPhy",
    "PhyRole",
    "PhyStats",
    "Event",
    "Simulator",
    "SPEED_OF_LIGHT",
    "Packet",
    "SignalParameters",
]
