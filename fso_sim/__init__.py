"""
FSO-SIM: Discrete-event simulation of free-space optical down links

A toolkit for modelling satellite-to-ground Free Space Optical (FSO) links:
a channel composing propagation loss models, a physical layer send/receive
path and a turbulence-driven packet error model.
"""

__version__ = "0.1.0"
__author__ = "FSO-SIM Development Team"
__email__ = "contact@fso-sim.org"

from .simulation import (
    DownlinkScenario,
    FsoChannel,
    FsoErrorModel,
    FsoPhy,
    LinkConfig,
    SignalParameters,
)
from .utils import *

__all__ = [
    "DownlinkScenario",
    "FsoChannel",
    "FsoErrorModel",
    "FsoPhy",
    "LinkConfig",
    "SignalParameters",
]
