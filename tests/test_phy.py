"""
Tests for the FSO phy.
"""

import pytest

from fso_sim.simulation import (
    ConfigurationError,
    ConstantPositionMobility,
    FsoErrorModel,
    FsoPhy,
    Packet,
    PhyRole,
    SignalParameters,
)

from conftest import BIT_RATE, WAVELENGTH


class TestPhyConfiguration:
    """Test cases for phy roles and validation."""

    def test_roles(self, tx_phy, rx_phy):
        assert tx_phy.role is PhyRole.TRANSMIT
        assert rx_phy.role is PhyRole.RECEIVE

    def test_receive_phy_requires_error_model(self, receiver):
        phy = FsoPhy("rx")
        phy.set_mobility(ConstantPositionMobility())
        phy.set_antennas(None, receiver)

        with pytest.raises(ConfigurationError, match="no error model"):
            phy.validate()

    def test_phy_requires_mobility(self, laser):
        phy = FsoPhy("tx")
        phy.set_antennas(laser, None)

        with pytest.raises(ConfigurationError, match="no mobility model"):
            phy.validate()

    def test_phy_requires_antenna(self):
        phy = FsoPhy("bare")
        phy.set_mobility(ConstantPositionMobility())

        with pytest.raises(ConfigurationError, match="no antenna"):
            phy.validate()

    def test_negative_bit_rate(self, tx_phy):
        with pytest.raises(ConfigurationError, match="Bit rate"):
            tx_phy.set_bit_rate(-1.0)


class TestPhySend:
    """Test cases for FsoPhy.send_packet."""

    def test_send_without_channel(self, tx_phy):
        params = SignalParameters.for_link(WAVELENGTH, BIT_RATE)

        with pytest.raises(ConfigurationError, match="not attached to a channel"):
            tx_phy.send_packet(Packet(1024), params)

    def test_send_without_laser(self, channel, rx_phy):
        params = SignalParameters.for_link(WAVELENGTH, BIT_RATE)

        with pytest.raises(ConfigurationError, match="no transmit antenna"):
            rx_phy.send_packet(Packet(1024), params)

    def test_send_stamps_identity_and_laser(self, simulator, channel, tx_phy, rx_phy, laser):
        """Test the laser supplies power and beam geometry left unset in params."""
        received = []
        rx_phy.set_receive_callback(lambda packet, params: received.append(params))
        params = SignalParameters.for_link(WAVELENGTH, BIT_RATE)

        tx_phy.send_packet(Packet(1024), params)
        simulator.run()

        rx_params = received[0]
        assert rx_params.tx_phy is tx_phy
        assert rx_params.tx_antenna is laser
        assert rx_params.tx_beamwidth == laser.beam_radius
        assert rx_params.tx_phase_front_radius == laser.phase_front_radius
        assert tx_phy.stats.tx_packets == 1
        # Caller's record is left alone
        assert params.tx_phy is None
        assert params.power == 0.0

    def test_explicit_params_take_precedence(self, simulator, channel, tx_phy, rx_phy):
        received = []
        rx_phy.set_receive_callback(lambda packet, params: received.append(params))
        params = SignalParameters.for_link(WAVELENGTH, BIT_RATE, tx_beamwidth=0.03)

        tx_phy.send_packet(Packet(1024), params)
        simulator.run()

        assert received[0].tx_beamwidth == 0.03


class TestPhyReceive:
    """Test cases for FsoPhy.receive."""

    def test_receive_without_error_model(self, tx_phy):
        """Test a transmit-only phy delivers arrivals untouched."""
        delivered = []
        tx_phy.set_receive_callback(lambda packet, params: delivered.append(packet))
        packet = Packet(1024)

        tx_phy.receive(packet, SignalParameters(wavelength=WAVELENGTH))

        assert delivered == [packet]
        assert not packet.is_corrupted
        assert tx_phy.stats.rx_ok == 1

    def test_receive_marks_corrupted(self, rx_phy):
        """Test an arrival far below sensitivity is delivered as corrupted."""
        delivered = []
        rx_phy.set_receive_callback(lambda packet, params: delivered.append(packet))
        params = SignalParameters(
            wavelength=WAVELENGTH,
            scintillation_index=0.1,
            mean_irradiance=0.0
        )

        rx_phy.receive(Packet(1024), params)

        assert delivered[0].is_corrupted
        assert delivered[0].size_bytes == 1024
        assert rx_phy.stats.rx_corrupted == 1

    def test_receive_with_misconfigured_chain(self, rx_phy):
        params = SignalParameters(wavelength=WAVELENGTH)

        with pytest.raises(ConfigurationError, match="missing"):
            rx_phy.receive(Packet(1024), params)

    def test_error_model_consulted_once_per_arrival(self, rx_phy):
        calls = []

        class CountingErrorModel(FsoErrorModel):
            def is_corrupted(self, params):
                calls.append(params)
                return False

        rx_phy.set_error_model(CountingErrorModel())
        params = SignalParameters(wavelength=WAVELENGTH, scintillation_index=0.1, mean_irradiance=1.0)
        rx_phy.receive(Packet(1024), params)

        assert calls == [params]
