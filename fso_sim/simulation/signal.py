"""
Signal descriptors exchanged between phys and the FSO channel.

This module contains:
- SignalParameters: the per-transmission record passed through the loss chain
- Packet: the opaque payload carried by a transmission
"""

import copy
import itertools
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import numpy as np

from .errors import ConfigurationError

# Value used by the reference downlink scenario for frequency and delay.
SPEED_OF_LIGHT = 3e8  # m/s

_packet_uids = itertools.count()


@dataclass
class SignalParameters:
    """
    Container for the parameters of one optical transmission.

    The transmitter fills in the identity fields (wavelength, frequency,
    symbol period, tx phy/antenna) and the beam geometry. The loss models
    fill in the remaining fields as the record travels through the channel's
    chain; they start out as None so that a missing upstream model can be
    detected.
    """
    wavelength: float  # m
    frequency: float = 0.0  # Hz
    symbol_period: float = 0.0  # s
    power: float = 0.0  # W
    tx_phy: Optional[Any] = None
    tx_antenna: Optional[Any] = None
    tx_beamwidth: float = 0.0  # m, beam radius at the transmitter
    tx_phase_front_radius: float = 0.0  # m, 0 means collimated

    # Loss chain outputs
    path_loss_db: Optional[float] = None
    rytov_variance: Optional[float] = None
    scintillation_index: Optional[float] = None
    rx_beamwidth: Optional[float] = None  # m
    mean_irradiance: Optional[float] = None

    @classmethod
    def for_link(
        cls,
        wavelength: float,
        bit_rate: float,
        power: float = 0.0,
        tx_beamwidth: float = 0.0,
        tx_phase_front_radius: float = 0.0,
    ) -> 'SignalParameters':
        """
        Create parameters with frequency and symbol period derived from the link.

        Args:
            wavelength: Optical wavelength in m
            bit_rate: Link bit rate in bit/s; zero gives an infinite symbol period
            power: Transmit power in W (0 lets the laser antenna decide)
            tx_beamwidth: Beam radius at the transmitter in m
            tx_phase_front_radius: Phase front radius of curvature in m

        Returns:
            New SignalParameters instance
        """
        if wavelength <= 0:
            raise ConfigurationError("Wavelength must be positive")
        if bit_rate < 0:
            raise ConfigurationError("Bit rate must be non-negative")

        symbol_period = 1.0 / bit_rate if bit_rate > 0 else float("inf")
        return cls(
            wavelength=wavelength,
            frequency=SPEED_OF_LIGHT / wavelength,
            symbol_period=symbol_period,
            power=power,
            tx_beamwidth=tx_beamwidth,
            tx_phase_front_radius=tx_phase_front_radius,
        )

    @property
    def wavenumber(self) -> float:
        """Optical wavenumber k = 2π/λ in rad/m."""
        return 2 * np.pi / self.wavelength

    def copy(self) -> 'SignalParameters':
        """Shallow copy; phy and antenna references are shared, values are not."""
        return copy.copy(self)

    def to_dict(self) -> Dict:
        """Convert the numeric fields to a dictionary (object references are dropped)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("tx_phy", "tx_antenna")
        }


@dataclass
class Packet:
    """
    A fixed-size packet carried by a single transmission.

    The physical layer only ever flips the corruption flag; size and identity
    are never touched.
    """
    size_bytes: int
    uid: int = field(default_factory=lambda: next(_packet_uids))
    is_corrupted: bool = False

    def __post_init__(self):
        if self.size_bytes < 0:
            raise ConfigurationError("Packet size must be non-negative")

    @property
    def size_bits(self) -> int:
        return self.size_bytes * 8

    def copy(self) -> 'Packet':
        """Copy that keeps the uid, so each receiver gets its own corruption flag."""
        return replace(self)

    def mark_corrupted(self):
        self.is_corrupted = True
