"""
FSO physical layer.

A phy bridges packet sends to the channel's signal model and turns arriving
signals back into delivered (possibly corrupted) packets.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from .antenna import LaserAntenna, OpticalRxAntenna
from .errors import ConfigurationError
from .mobility import ConstantPositionMobility
from .signal import Packet, SignalParameters

logger = logging.getLogger(__name__)


class PhyRole(Enum):
    """Role of a phy, fixed by its antenna configuration."""
    TRANSMIT = auto()
    RECEIVE = auto()


@dataclass
class PhyStats:
    """Packet counters kept by each phy."""
    tx_packets: int = 0
    rx_packets: int = 0
    rx_corrupted: int = 0

    @property
    def rx_ok(self) -> int:
        return self.rx_packets - self.rx_corrupted


class FsoPhy:
    """
    Down link phy for a satellite laser terminal or an optical ground station.

    A phy with a receive antenna is receive-capable and must have an error
    model; a phy with only a laser is transmit-only and delivers arrivals
    untouched.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._mobility: Optional[ConstantPositionMobility] = None
        self._channel = None
        self._tx_antenna: Optional[LaserAntenna] = None
        self._rx_antenna: Optional[OpticalRxAntenna] = None
        self._error_model = None
        self._device: Any = None
        self._receive_callback: Optional[Callable[[Packet, SignalParameters], None]] = None
        self.bit_rate = 0.0
        self.stats = PhyStats()
        self.last_rx_params: Optional[SignalParameters] = None

    def __repr__(self):
        return f"FsoPhy({self.name!r})" if self.name else f"FsoPhy(at {id(self):#x})"

    # Configuration

    def set_mobility(self, mobility: ConstantPositionMobility):
        self._mobility = mobility

    def get_mobility(self) -> ConstantPositionMobility:
        if self._mobility is None:
            raise ConfigurationError(f"{self!r} has no mobility model")
        return self._mobility

    def set_channel(self, channel):
        """
        Attach to a channel, or detach with None.

        Goes through the channel so the phy is listed by exactly one channel.
        """
        if channel is None:
            if self._channel is not None:
                self._channel.remove(self)
        else:
            channel.add(self)

    def _bind_channel(self, channel):
        self._channel = channel

    def get_channel(self):
        return self._channel

    def set_antennas(
        self,
        tx_antenna: Optional[LaserAntenna],
        rx_antenna: Optional[OpticalRxAntenna]
    ):
        self._tx_antenna = tx_antenna
        self._rx_antenna = rx_antenna

    def get_tx_antenna(self) -> Optional[LaserAntenna]:
        return self._tx_antenna

    def get_rx_antenna(self) -> Optional[OpticalRxAntenna]:
        return self._rx_antenna

    def set_device(self, device: Any):
        self._device = device

    def get_device(self) -> Any:
        return self._device

    def set_bit_rate(self, bit_rate: float):
        if bit_rate < 0:
            raise ConfigurationError("Bit rate must be non-negative")
        self.bit_rate = bit_rate

    def set_error_model(self, error_model):
        """Install the error model and bind it back to this phy."""
        if error_model is not None:
            error_model.set_phy(self)
        self._error_model = error_model

    def get_error_model(self):
        return self._error_model

    def set_receive_callback(self, callback: Callable[[Packet, SignalParameters], None]):
        """Set the upper-layer handler called with every delivered packet."""
        self._receive_callback = callback

    @property
    def role(self) -> PhyRole:
        return PhyRole.RECEIVE if self._rx_antenna is not None else PhyRole.TRANSMIT

    def validate(self):
        """
        Check that the phy is fully configured for its role.

        Raises:
            ConfigurationError: on missing mobility, antennas or error model
        """
        if self._mobility is None:
            raise ConfigurationError(f"{self!r} has no mobility model")
        if self._tx_antenna is None and self._rx_antenna is None:
            raise ConfigurationError(f"{self!r} has no antenna")
        if self.role is PhyRole.RECEIVE and self._error_model is None:
            raise ConfigurationError(f"{self!r} is receive-capable but has no error model")

    # Data path

    def send_packet(self, packet: Packet, params: SignalParameters):
        """
        Transmit a packet over the attached channel.

        The laser is authoritative for transmit power and beam geometry: any of
        these left at zero in params are taken from the tx antenna.
        """
        if self._channel is None:
            raise ConfigurationError(f"{self!r} is not attached to a channel")
        if self._tx_antenna is None:
            raise ConfigurationError(f"{self!r} has no transmit antenna")

        params = params.copy()
        params.tx_phy = self
        params.tx_antenna = self._tx_antenna
        if params.power <= 0:
            params.power = self._tx_antenna.tx_power
        if params.tx_beamwidth <= 0:
            params.tx_beamwidth = self._tx_antenna.beam_radius
        if params.tx_phase_front_radius <= 0:
            params.tx_phase_front_radius = self._tx_antenna.phase_front_radius

        self.stats.tx_packets += 1
        logger.info(
            f"{self!r} sending packet {packet.uid} ({packet.size_bytes} bytes) "
            f"with P_tx={params.power} W at λ={params.wavelength * 1e9:.1f} nm"
        )
        self._channel.send(self, packet, params)

    def receive(self, packet: Packet, params: SignalParameters):
        """Handle an arrival scheduled by the channel."""
        if self._error_model is not None and self._error_model.is_corrupted(params):
            packet.mark_corrupted()

        self.stats.rx_packets += 1
        if packet.is_corrupted:
            self.stats.rx_corrupted += 1
        self.last_rx_params = params

        logger.info(
            f"{self!r} received packet {packet.uid}: "
            f"{'corrupted' if packet.is_corrupted else 'ok'}"
        )
        if self._receive_callback is not None:
            self._receive_callback(packet, params)
