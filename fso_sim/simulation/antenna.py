"""
Optical antenna models.

- LaserAntenna: transmitting laser terminal (beam geometry, power, gain)
- OpticalRxAntenna: receiving telescope (aperture and gain)
"""

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError


@dataclass
class LaserAntenna:
    """Transmitting laser terminal."""
    beamwidth: float = 0.0  # Full beam diameter at the aperture in m
    phase_front_radius: float = 0.0  # m, 0 means collimated
    orientation: float = 0.0  # rad
    tx_power: float = 0.0  # W
    gain_db: float = 0.0  # dB

    def __post_init__(self):
        if self.beamwidth < 0:
            raise ConfigurationError("Laser beamwidth must be non-negative")
        if self.phase_front_radius < 0:
            raise ConfigurationError("Phase front radius must be non-negative")
        if self.tx_power < 0:
            raise ConfigurationError("Laser transmit power must be non-negative")

    def get_gain(self) -> float:
        """Gain in dB."""
        return self.gain_db

    def get_orientation(self) -> float:
        return self.orientation

    def get_beamwidth(self) -> float:
        return self.beamwidth

    @property
    def beam_radius(self) -> float:
        """Beam radius W0 in m, half the configured beamwidth."""
        return self.beamwidth / 2.0


@dataclass
class OpticalRxAntenna:
    """Receiving telescope of an optical ground station."""
    aperture_diameter: float = 0.0  # m
    rx_gain_db: float = 0.0  # dB
    orientation: float = 0.0  # rad

    def __post_init__(self):
        if self.aperture_diameter < 0:
            raise ConfigurationError("Aperture diameter must be non-negative")

    def get_gain(self) -> float:
        """Gain in dB."""
        return self.rx_gain_db

    def get_orientation(self) -> float:
        return self.orientation

    def get_aperture_diameter(self) -> float:
        return self.aperture_diameter

    @property
    def aperture_area(self) -> float:
        """Collecting area in m²."""
        return np.pi * (self.aperture_diameter / 2.0) ** 2
