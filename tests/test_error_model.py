"""
Tests for the turbulence-driven error model.
"""

import numpy as np
import pytest
from scipy import stats

from fso_sim.simulation import (
    ConfigurationError,
    FsoErrorModel,
    FsoPhy,
    OpticalRxAntenna,
    SignalParameters,
    gamma_gamma_parameters,
)

from conftest import WAVELENGTH

NUM_TRIALS = 10000


def arrival(mean_irradiance=1e-3, scintillation_index=0.3, rytov_variance=0.5):
    return SignalParameters(
        wavelength=WAVELENGTH,
        mean_irradiance=mean_irradiance,
        scintillation_index=scintillation_index,
        rytov_variance=rytov_variance
    )


def receiving(model):
    """Attach a model to a 0 dB receiver so the threshold applies to the mean irradiance."""
    phy = FsoPhy("rx")
    phy.set_antennas(None, OpticalRxAntenna(aperture_diameter=0.318, rx_gain_db=0.0))
    phy.set_error_model(model)
    return model


class TestErrorModelConfiguration:
    """Test cases for error model setup."""

    def test_unknown_distribution(self):
        with pytest.raises(ConfigurationError, match="Unknown fading distribution"):
            FsoErrorModel(distribution="rayleigh")

    def test_phy_bound_once(self):
        model = FsoErrorModel()
        first = FsoPhy("a")
        model.set_phy(first)
        model.set_phy(first)

        with pytest.raises(ConfigurationError, match="already bound"):
            model.set_phy(FsoPhy("b"))
        assert model.get_phy() is first

    def test_phy_binds_its_error_model(self):
        model = FsoErrorModel()
        phy = FsoPhy("rx")
        phy.set_error_model(model)

        assert model.get_phy() is phy
        with pytest.raises(ConfigurationError, match="already bound"):
            FsoPhy("other").set_error_model(model)

    def test_unbound_model_has_no_receiver_gain(self):
        """Test an unbound model refuses to guess the receiver gain."""
        model = FsoErrorModel()

        with pytest.raises(ConfigurationError, match="not bound to a phy"):
            model.received_power(arrival())

    def test_phy_without_receive_antenna(self):
        model = FsoErrorModel()
        FsoPhy("tx-only").set_error_model(model)

        with pytest.raises(ConfigurationError, match="no receive antenna"):
            model.is_corrupted(arrival())

    def test_missing_fields(self):
        """Test that a misconfigured chain is reported instead of defaulted."""
        model = FsoErrorModel()
        params = SignalParameters(wavelength=WAVELENGTH, mean_irradiance=1e-3)

        with pytest.raises(ConfigurationError, match="scintillation_index"):
            model.is_corrupted(params)

    def test_gamma_gamma_requires_rytov_variance(self):
        model = FsoErrorModel(distribution="gamma-gamma")
        assert "rytov_variance" in model.requires

        params = arrival(rytov_variance=None)
        with pytest.raises(ConfigurationError, match="rytov_variance"):
            model.is_corrupted(params)

    def test_threshold_from_sensitivity(self):
        assert FsoErrorModel(rx_sensitivity_dbm=0.0).threshold == pytest.approx(1e-3)
        assert FsoErrorModel(rx_sensitivity_dbm=-30.0).threshold == pytest.approx(1e-6)

    def test_receiver_gain_applied(self, rx_phy, receiver):
        model = rx_phy.get_error_model()
        params = arrival(mean_irradiance=1e-15)

        assert model.received_power(params) == pytest.approx(1e-15 * 10 ** (receiver.rx_gain_db / 10))


class TestErrorModelDecisions:
    """Test cases for corruption decisions."""

    def test_far_above_threshold_never_corrupted(self):
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=-60.0, seed=0))
        params = arrival(mean_irradiance=1e-3, scintillation_index=0.1)

        assert not any(model.is_corrupted(params) for _ in range(1000))

    def test_far_below_threshold_always_corrupted(self):
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=30.0, seed=0))
        params = arrival(mean_irradiance=1e-3, scintillation_index=0.1)

        assert all(model.is_corrupted(params) for _ in range(1000))

    def test_no_turbulence_is_deterministic(self):
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0, seed=0))
        above = arrival(mean_irradiance=2e-3, scintillation_index=0.0)
        below = arrival(mean_irradiance=0.5e-3, scintillation_index=0.0)

        assert not model.is_corrupted(above)
        assert model.is_corrupted(below)
        assert model.outage_probability(above) == 0.0
        assert model.outage_probability(below) == 1.0

    def test_seeded_models_replay(self):
        params = arrival()
        a = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0, seed=7))
        b = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0, seed=7))

        assert [a.is_corrupted(params) for _ in range(100)] == [b.is_corrupted(params) for _ in range(100)]

    def test_draws_are_independent(self):
        """Test repeated calls with the same input do not repeat one draw."""
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0, seed=11))
        params = arrival()

        outcomes = {model.is_corrupted(params) for _ in range(200)}
        assert outcomes == {True, False}


class TestErrorModelStatistics:
    """Statistical tests of the corruption rate."""

    def test_lognormal_outage_probability(self):
        """Test the analytic log-normal outage against the closed form."""
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0))
        params = arrival(mean_irradiance=1e-3, scintillation_index=0.3)

        sigma = np.sqrt(np.log(1.3))
        expected = stats.norm.cdf(sigma / 2)
        assert model.outage_probability(params) == pytest.approx(expected, rel=1e-6)

    @pytest.mark.parametrize("distribution", ["lognormal", "gamma-gamma"])
    def test_corruption_rate_matches_outage(self, distribution):
        """Test 10,000 trials agree with the analytic outage probability."""
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=0.0, distribution=distribution, seed=2024))
        params = arrival(mean_irradiance=1.2e-3, scintillation_index=0.3, rytov_variance=0.3)

        rate = np.mean([model.is_corrupted(params) for _ in range(NUM_TRIALS)])
        expected = model.outage_probability(params)

        assert 0.05 < expected < 0.95
        tolerance = 4 * np.sqrt(expected * (1 - expected) / NUM_TRIALS)
        assert abs(rate - expected) < tolerance

    @pytest.mark.parametrize("distribution", ["lognormal", "gamma-gamma"])
    def test_fading_has_unit_mean(self, distribution):
        model = receiving(FsoErrorModel(distribution=distribution, seed=5))
        params = arrival(scintillation_index=0.2, rytov_variance=0.2)

        samples = np.array([model.sample_fading(params) for _ in range(NUM_TRIALS)])

        assert np.all(samples > 0)
        assert samples.mean() == pytest.approx(1.0, abs=0.03)

    def test_stronger_turbulence_raises_outage_below_mean(self):
        """Test deeper fades are more likely when the scintillation index grows."""
        model = receiving(FsoErrorModel(rx_sensitivity_dbm=-3.0))
        weak = model.outage_probability(arrival(mean_irradiance=1e-3, scintillation_index=0.05))
        strong = model.outage_probability(arrival(mean_irradiance=1e-3, scintillation_index=0.5))

        assert strong > weak


class TestGammaGammaParameters:
    """Test cases for gamma_gamma_parameters."""

    def test_no_turbulence(self):
        alpha, beta = gamma_gamma_parameters(0.0)
        assert np.isinf(alpha) and np.isinf(beta)

    def test_scintillation_index_consistency(self):
        """Test 1/α + 1/β + 1/(αβ) reproduces the plane-wave scintillation index."""
        from fso_sim.simulation import DownLinkScintillationIndexModel

        rytov = 0.8
        alpha, beta = gamma_gamma_parameters(rytov)
        index = 1 / alpha + 1 / beta + 1 / (alpha * beta)

        assert index == pytest.approx(DownLinkScintillationIndexModel.compute_scintillation_index(rytov))
