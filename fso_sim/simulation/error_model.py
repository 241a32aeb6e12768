"""
Receiver error model for turbulent FSO down links.

The model draws an instantaneous irradiance from the mean irradiance and a
unit-mean fading distribution parameterised by the turbulence statistics in
the signal parameters, applies the receiver gain and compares the result
against the receiver sensitivity.
"""

import logging
from typing import FrozenSet, Optional, Tuple

import numpy as np
from scipy import integrate, stats

from .errors import ConfigurationError
from .signal import SignalParameters

logger = logging.getLogger(__name__)

FADING_DISTRIBUTIONS = ("lognormal", "gamma-gamma")


def gamma_gamma_parameters(rytov_variance: float) -> Tuple[float, float]:
    """
    Large- and small-scale eddy parameters (α, β) of the gamma-gamma model.

    Args:
        rytov_variance: Plane-wave Rytov variance

    Returns:
        Tuple (alpha, beta); both infinite when there is no turbulence
    """
    s = max(rytov_variance, 0.0)
    if s == 0:
        return np.inf, np.inf
    s_12_5 = s ** 1.2
    alpha = 1.0 / np.expm1(0.49 * s / (1 + 1.11 * s_12_5) ** (7 / 6))
    beta = 1.0 / np.expm1(0.51 * s / (1 + 0.69 * s_12_5) ** (5 / 6))
    return alpha, beta


class FsoErrorModel:
    """
    Packet error model attached to a receive-capable phy.

    Args:
        rx_sensitivity_dbm: Minimum detectable received power in dBm
        distribution: Fading distribution, 'lognormal' or 'gamma-gamma'
        seed: Seed for the model's own random generator
        rng: Generator to use instead of seeding a new one
    """

    def __init__(
        self,
        rx_sensitivity_dbm: float = -45.0,
        distribution: str = "lognormal",
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ):
        if distribution not in FADING_DISTRIBUTIONS:
            raise ConfigurationError(
                f"Unknown fading distribution: {distribution}. Valid: {FADING_DISTRIBUTIONS}"
            )
        self.rx_sensitivity_dbm = rx_sensitivity_dbm
        self.distribution = distribution
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._phy = None

    @property
    def requires(self) -> FrozenSet[str]:
        """SignalParameters fields that must be produced by the loss chain."""
        fields = {"scintillation_index", "mean_irradiance"}
        if self.distribution == "gamma-gamma":
            fields.add("rytov_variance")
        return frozenset(fields)

    def set_phy(self, phy):
        """
        Bind the model to the phy it evaluates arrivals for. Can only be done once.

        FsoPhy.set_error_model calls this, so the rx antenna gain always comes
        from the owning phy.
        """
        if self._phy is not None and phy is not self._phy:
            raise ConfigurationError("Error model is already bound to another phy")
        self._phy = phy

    def get_phy(self):
        return self._phy

    @property
    def threshold(self) -> float:
        """Receiver sensitivity in W."""
        return 10 ** ((self.rx_sensitivity_dbm - 30) / 10)

    def _rx_gain(self) -> float:
        if self._phy is None:
            raise ConfigurationError("Error model is not bound to a phy")
        antenna = self._phy.get_rx_antenna()
        if antenna is None:
            raise ConfigurationError(f"{self._phy!r} has no receive antenna")
        return 10 ** (antenna.get_gain() / 10)

    def _check_params(self, params: SignalParameters):
        missing = [name for name in sorted(self.requires) if getattr(params, name) is None]
        if missing:
            raise ConfigurationError(
                f"Signal parameters are missing {missing}; check the channel loss models"
            )

    def received_power(self, params: SignalParameters) -> float:
        """Mean received power in W after the receiver gain."""
        self._check_params(params)
        return params.mean_irradiance * self._rx_gain()

    def fading_threshold(self, params: SignalParameters) -> float:
        """Fading sample value below which the packet is lost."""
        power = self.received_power(params)
        if power <= 0:
            return np.inf
        return self.threshold / power

    def sample_fading(self, params: SignalParameters) -> float:
        """Draw one unit-mean irradiance fluctuation."""
        if self.distribution == "lognormal":
            sigma2 = np.log1p(max(params.scintillation_index, 0.0))
            if sigma2 == 0:
                return 1.0
            return float(self.rng.lognormal(mean=-sigma2 / 2, sigma=np.sqrt(sigma2)))

        alpha, beta = gamma_gamma_parameters(params.rytov_variance)
        x = 1.0 if np.isinf(alpha) else self.rng.gamma(alpha, 1.0 / alpha)
        y = 1.0 if np.isinf(beta) else self.rng.gamma(beta, 1.0 / beta)
        return float(x * y)

    def is_corrupted(self, params: SignalParameters) -> bool:
        """
        Decide whether an arrival is corrupted.

        Each call makes an independent draw from the model's generator.

        Raises:
            ConfigurationError: if the loss chain did not fill in the
                turbulence statistics
        """
        self._check_params(params)
        fading = self.sample_fading(params)
        rx_power = self.received_power(params) * fading
        corrupted = bool(rx_power < self.threshold)

        logger.debug(
            f"Error model: <I>={params.mean_irradiance:.4e}, σ_I²={params.scintillation_index:.4e}, "
            f"fading={fading:.4f}, P_rx={rx_power:.4e} W, threshold={self.threshold:.4e} W, "
            f"corrupted={corrupted}"
        )
        return corrupted

    def outage_probability(self, params: SignalParameters) -> float:
        """
        Probability that an arrival with these parameters is corrupted.

        Returns:
            Probability in [0, 1]
        """
        h_th = self.fading_threshold(params)
        if np.isinf(h_th):
            return 1.0

        if self.distribution == "lognormal":
            sigma2 = np.log1p(max(params.scintillation_index, 0.0))
            if sigma2 == 0:
                return float(h_th > 1.0)
            fading = stats.lognorm(s=np.sqrt(sigma2), scale=np.exp(-sigma2 / 2))
            return float(fading.cdf(h_th))

        alpha, beta = gamma_gamma_parameters(params.rytov_variance)
        if np.isinf(alpha):
            return float(h_th > 1.0)

        # P(XY < h) = E_Y[F_X(h / Y)] with X ~ Gamma(α, 1/α), Y ~ Gamma(β, 1/β)
        x_dist = stats.gamma(a=alpha, scale=1.0 / alpha)
        y_dist = stats.gamma(a=beta, scale=1.0 / beta)
        probability, _ = integrate.quad(
            lambda y: (x_dist.cdf(h_th / y) if y > 0 else 1.0) * y_dist.pdf(y),
            0,
            np.inf,
            limit=200
        )
        return float(np.clip(probability, 0.0, 1.0))
