"""
Shared fixtures for the FSO-SIM tests.
"""

import pytest

from fso_sim.simulation import (
    ConstantPositionMobility,
    ConstantSpeedPropagationDelayModel,
    DownLinkScintillationIndexModel,
    FreeSpaceLossModel,
    FsoChannel,
    FsoErrorModel,
    FsoPhy,
    LaserAntenna,
    MeanIrradianceModel,
    OpticalRxAntenna,
    SignalParameters,
    Simulator,
)

SATELLITE_ALTITUDE = 707000.0
WAVELENGTH = 847e-9
BIT_RATE = 49.3724e6


@pytest.fixture
def simulator():
    return Simulator()


@pytest.fixture
def laser():
    return LaserAntenna(
        beamwidth=0.120,
        phase_front_radius=SATELLITE_ALTITUDE,
        tx_power=0.1,
        gain_db=116.0
    )


@pytest.fixture
def receiver():
    return OpticalRxAntenna(aperture_diameter=0.318, rx_gain_db=121.4)


@pytest.fixture
def tx_phy(laser):
    phy = FsoPhy("tx")
    phy.set_mobility(ConstantPositionMobility((0.0, 0.0, SATELLITE_ALTITUDE)))
    phy.set_antennas(laser, None)
    phy.set_bit_rate(BIT_RATE)
    return phy


@pytest.fixture
def rx_phy(receiver):
    phy = FsoPhy("rx")
    phy.set_mobility(ConstantPositionMobility((0.0, 0.0, 0.0)))
    phy.set_antennas(None, receiver)
    phy.set_bit_rate(BIT_RATE)
    error_model = FsoErrorModel(seed=1)
    phy.set_error_model(error_model)
    return phy


@pytest.fixture
def channel(simulator, tx_phy, rx_phy):
    channel = FsoChannel(simulator)
    channel.set_propagation_delay_model(ConstantSpeedPropagationDelayModel())
    channel.add_propagation_loss_model(FreeSpaceLossModel())
    channel.add_propagation_loss_model(DownLinkScintillationIndexModel())
    channel.add_propagation_loss_model(MeanIrradianceModel())
    channel.add(tx_phy)
    channel.add(rx_phy)
    return channel


@pytest.fixture
def tx_params(laser, tx_phy):
    """Transmit parameters as stamped by the transmitting phy."""
    params = SignalParameters.for_link(
        wavelength=WAVELENGTH,
        bit_rate=BIT_RATE,
        power=laser.tx_power,
        tx_beamwidth=laser.beam_radius,
        tx_phase_front_radius=laser.phase_front_radius
    )
    params.tx_phy = tx_phy
    params.tx_antenna = laser
    return params
