"""
Downlink scenario assembly.

This module provides the LinkConfig dataclass holding every tunable of a
satellite-to-ground FSO link and the DownlinkScenario class that wires the
mobility models, antennas, loss chain, channel, phys and error model together
and runs packets through them.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import yaml

from .antenna import LaserAntenna, OpticalRxAntenna
from .channel import FsoChannel
from .delay import ConstantSpeedPropagationDelayModel
from .error_model import FADING_DISTRIBUTIONS, FsoErrorModel
from .loss_models import (
    DownLinkScintillationIndexModel,
    FreeSpaceLossModel,
    MeanIrradianceModel,
)
from .mobility import ConstantPositionMobility
from .phy import FsoPhy
from .scheduler import Simulator
from .signal import Packet, SignalParameters

logger = logging.getLogger(__name__)


@dataclass
class LinkConfig:
    """Configuration for an FSO down link, defaulting to a LEO satellite at zenith."""
    # Geometry
    tx_position: List[float] = field(default_factory=lambda: [0.0, 0.0, 707000.0])  # m
    rx_position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # m

    # Laser terminal
    tx_power: float = 0.1  # W
    tx_gain_db: float = 116.0  # dB
    beamwidth: float = 0.120  # m, full diameter
    phase_front_radius: float = 707000.0  # m

    # Optical ground station
    aperture_diameter: float = 0.318  # m
    rx_gain_db: float = 121.4  # dB
    rx_sensitivity_dbm: float = -45.0  # dBm

    # Link
    wavelength: float = 847e-9  # m
    bit_rate: float = 49.3724e6  # bit/s
    packet_size: int = 1024  # bytes

    # Turbulence (Hufnagel-Valley 5/7)
    rms_wind_speed: float = 21.0  # m/s
    gnd_refractive_idx: float = 1.7e-14  # m^(-2/3)
    fading_distribution: str = "lognormal"

    seed: Optional[int] = 42

    def validate(self):
        """Validate configuration parameters."""
        if len(self.tx_position) != 3 or len(self.rx_position) != 3:
            raise ValueError("Positions must have three coordinates")
        if self.tx_power < 0:
            raise ValueError("Transmit power must be non-negative")
        if self.beamwidth <= 0:
            raise ValueError("Beamwidth must be positive")
        if self.phase_front_radius < 0:
            raise ValueError("Phase front radius must be non-negative")
        if self.aperture_diameter <= 0:
            raise ValueError("Aperture diameter must be positive")
        if self.wavelength <= 0:
            raise ValueError("Wavelength must be positive")
        if self.bit_rate < 0:
            raise ValueError("Bit rate must be non-negative")
        if self.packet_size <= 0:
            raise ValueError("Packet size must be positive")
        if self.rms_wind_speed < 0:
            raise ValueError("Wind speed must be non-negative")
        if self.gnd_refractive_idx < 0:
            raise ValueError("Refractive index structure constant must be non-negative")
        if self.fading_distribution not in FADING_DISTRIBUTIONS:
            raise ValueError(f"Fading distribution must be one of {FADING_DISTRIBUTIONS}")

    @property
    def link_distance(self) -> float:
        return float(np.linalg.norm(np.subtract(self.tx_position, self.rx_position)))

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'LinkConfig':
        """Create from dictionary."""
        return cls(**data)

    def save(self, filepath: Path):
        """Save configuration to a JSON or YAML file, chosen by suffix."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            if filepath.suffix in ('.yaml', '.yml'):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> 'LinkConfig':
        """Load configuration from a JSON or YAML file."""
        filepath = Path(filepath)
        with open(filepath, 'r') as f:
            if filepath.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        return cls.from_dict(data)


@dataclass
class LinkResult:
    """Container for the outcome of a scenario run."""
    packets_sent: int
    packets_received: int
    packets_corrupted: int
    corruption_rate: float
    outage_probability: float
    propagation_delay: float  # s
    rx_params: Optional[SignalParameters] = None

    def to_dict(self) -> Dict:
        return {
            'packets_sent': self.packets_sent,
            'packets_received': self.packets_received,
            'packets_corrupted': self.packets_corrupted,
            'corruption_rate': self.corruption_rate,
            'outage_probability': self.outage_probability,
            'propagation_delay': self.propagation_delay,
            'rx_params': self.rx_params.to_dict() if self.rx_params is not None else None,
        }


class DownlinkScenario:
    """
    Satellite to ground station link with one transmit and one receive phy.

    The channel runs free space loss, then the scintillation index model,
    then the mean irradiance model.
    """

    def __init__(self, config: Optional[LinkConfig] = None, **kwargs):
        """
        Build the scenario.

        Args:
            config: Link configuration object
            **kwargs: Configuration parameters (alternative to config object)
        """
        if config is None:
            config = LinkConfig(**kwargs)
        config.validate()
        self.config = config

        self.simulator = Simulator()

        self.tx_mobility = ConstantPositionMobility(config.tx_position)
        self.rx_mobility = ConstantPositionMobility(config.rx_position)

        self.laser = LaserAntenna(
            beamwidth=config.beamwidth,
            phase_front_radius=config.phase_front_radius,
            tx_power=config.tx_power,
            gain_db=config.tx_gain_db,
        )
        self.receiver = OpticalRxAntenna(
            aperture_diameter=config.aperture_diameter,
            rx_gain_db=config.rx_gain_db,
        )

        self.free_space_loss = FreeSpaceLossModel()
        self.scintillation_model = DownLinkScintillationIndexModel(
            rms_wind_speed=config.rms_wind_speed,
            gnd_refractive_idx=config.gnd_refractive_idx,
        )
        self.mean_irradiance_model = MeanIrradianceModel()

        self.delay_model = ConstantSpeedPropagationDelayModel()
        self.channel = FsoChannel(self.simulator)
        self.channel.set_propagation_delay_model(self.delay_model)

        self.error_model = FsoErrorModel(
            rx_sensitivity_dbm=config.rx_sensitivity_dbm,
            distribution=config.fading_distribution,
            seed=config.seed,
        )

        self.tx_phy = FsoPhy("satellite")
        self.tx_phy.set_mobility(self.tx_mobility)
        self.tx_phy.set_antennas(self.laser, None)
        self.tx_phy.set_bit_rate(config.bit_rate)

        self.rx_phy = FsoPhy("ground-station")
        self.rx_phy.set_mobility(self.rx_mobility)
        self.rx_phy.set_antennas(None, self.receiver)
        self.rx_phy.set_error_model(self.error_model)
        self.rx_phy.set_bit_rate(config.bit_rate)

        self.channel.add_propagation_loss_model(self.free_space_loss)
        self.channel.add_propagation_loss_model(self.scintillation_model)
        self.channel.add_propagation_loss_model(self.mean_irradiance_model)
        self.channel.add(self.tx_phy)
        self.channel.add(self.rx_phy)
        self.channel.validate()

    def make_signal_parameters(self) -> SignalParameters:
        """Transmit-side parameters; the laser supplies power and phase front radius."""
        return SignalParameters.for_link(
            wavelength=self.config.wavelength,
            bit_rate=self.config.bit_rate,
            tx_beamwidth=self.config.beamwidth / 2.0,
        )

    def run(self, num_packets: int = 1, interval: Optional[float] = None) -> LinkResult:
        """
        Send packets from the satellite and run the simulator to completion.

        Args:
            num_packets: Number of packets to send
            interval: Spacing between sends in s (default: one packet duration)

        Returns:
            LinkResult with the counters and the last received parameters
        """
        if num_packets < 0:
            raise ValueError("Number of packets must be non-negative")
        if interval is None:
            packet_bits = self.config.packet_size * 8
            interval = packet_bits / self.config.bit_rate if self.config.bit_rate > 0 else 0.0

        logger.info(
            f"Running down link scenario: {num_packets} packets over "
            f"{self.config.link_distance / 1000:.1f} km"
        )
        start = self.simulator.now
        for i in range(num_packets):
            self.simulator.schedule_at(
                start + i * interval,
                self.tx_phy.send_packet,
                Packet(self.config.packet_size),
                self.make_signal_parameters(),
            )
        self.simulator.run()

        stats = self.rx_phy.stats
        rx_params = self.rx_phy.last_rx_params
        outage = self.error_model.outage_probability(rx_params) if rx_params is not None else float('nan')
        rate = stats.rx_corrupted / stats.rx_packets if stats.rx_packets else 0.0

        result = LinkResult(
            packets_sent=self.tx_phy.stats.tx_packets,
            packets_received=stats.rx_packets,
            packets_corrupted=stats.rx_corrupted,
            corruption_rate=rate,
            outage_probability=outage,
            propagation_delay=self.delay_model.get_delay(self.tx_mobility, self.rx_mobility),
            rx_params=rx_params,
        )
        logger.info(
            f"Received {result.packets_received} packets, {result.packets_corrupted} corrupted "
            f"(rate {result.corruption_rate:.4f}, analytic outage {result.outage_probability:.4f})"
        )
        return result
