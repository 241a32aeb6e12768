"""
Propagation loss models for the FSO channel.

Each model takes the current SignalParameters and the two endpoint mobility
models and returns an updated copy. The channel runs them in attachment
order, so later models can consume fields written by earlier ones:

- FreeSpaceLossModel: geometric (Friis) power loss with the laser gain
- DownLinkScintillationIndexModel: Rytov variance and scintillation index
  from a Hufnagel-Valley Cn² profile
- MeanIrradianceModel: Gaussian beam spreading, including the long-term
  spread caused by turbulence
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet

import numpy as np
from scipy import integrate

from .mobility import ConstantPositionMobility
from .signal import SignalParameters

logger = logging.getLogger(__name__)


class PropagationLossModel(ABC):
    """
    Interface shared by all loss models in the channel chain.

    Attributes:
        provides: Names of the SignalParameters fields the model writes
    """
    provides: FrozenSet[str] = frozenset()

    @abstractmethod
    def apply(
        self,
        params: SignalParameters,
        tx_mobility: ConstantPositionMobility,
        rx_mobility: ConstantPositionMobility
    ) -> SignalParameters:
        """
        Compute adjusted signal parameters for one tx/rx pair.

        Args:
            params: Current signal parameters (left untouched)
            tx_mobility: Transmitter mobility
            rx_mobility: Receiver mobility

        Returns:
            Updated copy of the parameters
        """

    def __repr__(self):
        return f"{type(self).__name__}()"


class FreeSpaceLossModel(PropagationLossModel):
    """
    Friis free-space loss.

    P_rx = P_tx * G_tx * (λ / (4π d))²

    The laser gain is taken from params.tx_antenna when one is attached. The
    distance is floored at min_distance so co-located endpoints stay finite.
    """
    provides = frozenset({"power", "path_loss_db"})

    def __init__(self, min_distance: float = 1.0):
        if min_distance <= 0:
            raise ValueError("Minimum distance must be positive")
        self.min_distance = min_distance

    def compute_path_loss(self, distance: float, wavelength: float) -> float:
        """
        Linear free-space path loss (λ / 4πd)², always in (0, 1].

        Args:
            distance: Link distance in m
            wavelength: Wavelength in m

        Returns:
            Power ratio
        """
        d = max(distance, self.min_distance)
        return min((wavelength / (4 * np.pi * d)) ** 2, 1.0)

    def apply(self, params, tx_mobility, rx_mobility):
        distance = tx_mobility.distance_from(rx_mobility)
        path_loss = self.compute_path_loss(distance, params.wavelength)

        tx_gain_db = 0.0
        if params.tx_antenna is not None:
            tx_gain_db = params.tx_antenna.get_gain()

        out = params.copy()
        out.power = max(params.power, 0.0) * 10 ** (tx_gain_db / 10) * path_loss
        out.path_loss_db = -10 * np.log10(path_loss)

        logger.debug(
            f"Free space loss: d={distance:.1f} m, loss={out.path_loss_db:.2f} dB, "
            f"P_rx={out.power:.3e} W"
        )
        return out


class DownLinkScintillationIndexModel(PropagationLossModel):
    """
    Scintillation index of a downlink (space to ground) plane wave.

    Cn²(h) follows the Hufnagel-Valley profile with an RMS wind speed and a
    ground-level structure constant. The Rytov variance is integrated from the
    lower endpoint up to the lower of the upper endpoint and the turbulence
    ceiling, then mapped to the scintillation index with the weak-to-strong
    fluctuation expression for a plane wave.
    """
    provides = frozenset({"rytov_variance", "scintillation_index"})

    def __init__(
        self,
        rms_wind_speed: float = 21.0,
        gnd_refractive_idx: float = 1.7e-14,
        turbulence_ceiling: float = 30000.0,
        max_zenith_angle_deg: float = 85.0
    ):
        self.set_rms_wind_speed(rms_wind_speed)
        self.set_gnd_refractive_idx(gnd_refractive_idx)
        self.turbulence_ceiling = turbulence_ceiling
        self.max_zenith_angle_deg = max_zenith_angle_deg

    def set_rms_wind_speed(self, speed: float):
        if speed < 0:
            raise ValueError("RMS wind speed must be non-negative")
        self.rms_wind_speed = speed

    def set_gnd_refractive_idx(self, cn2: float):
        if cn2 < 0:
            raise ValueError("Ground refractive index structure constant must be non-negative")
        self.gnd_refractive_idx = cn2

    def compute_cn_squared(self, h: float) -> float:
        """
        Hufnagel-Valley refractive index structure parameter.

        Args:
            h: Altitude in m

        Returns:
            Cn² in m^(-2/3)
        """
        h = max(h, 0.0)
        v = self.rms_wind_speed
        return (
            0.00594 * (v / 27.0) ** 2 * (1e-5 * h) ** 10 * np.exp(-h / 1000)
            + 2.7e-16 * np.exp(-h / 1500)
            + self.gnd_refractive_idx * np.exp(-h / 100)
        )

    def compute_zenith_angle(self, tx_pos: np.ndarray, rx_pos: np.ndarray) -> float:
        """Zenith angle of the link seen from the lower endpoint, in rad."""
        delta = tx_pos - rx_pos
        distance = np.linalg.norm(delta)
        if distance == 0:
            return 0.0
        zenith = np.arccos(np.clip(abs(delta[2]) / distance, -1.0, 1.0))
        return min(zenith, np.deg2rad(self.max_zenith_angle_deg))

    def compute_rytov_variance(
        self,
        wavelength: float,
        h0: float,
        h_top: float,
        zenith_angle: float
    ) -> float:
        """
        Plane-wave Rytov variance along a slant path.

        σ_R² = 2.25 k^(7/6) sec^(11/6)(ζ) ∫ Cn²(h) (h - h0)^(5/6) dh

        Returns:
            Rytov variance (0 when the path has no vertical extent)
        """
        upper = min(h_top, self.turbulence_ceiling)
        if upper <= h0:
            return 0.0

        k = 2 * np.pi / wavelength
        breakpoints = [p for p in (h0 + 100.0, 1000.0, 10000.0) if h0 < p < upper]
        integral, _ = integrate.quad(
            lambda h: self.compute_cn_squared(h) * (h - h0) ** (5 / 6),
            h0,
            upper,
            points=breakpoints or None,
            limit=200
        )
        sec_zenith = 1.0 / np.cos(zenith_angle)
        return 2.25 * k ** (7 / 6) * sec_zenith ** (11 / 6) * integral

    @staticmethod
    def compute_scintillation_index(rytov_variance: float) -> float:
        """Plane-wave scintillation index valid from weak to strong fluctuations."""
        s = max(rytov_variance, 0.0)
        s_12_5 = s ** 1.2  # σ_R^(12/5)
        return float(np.expm1(
            0.49 * s / (1 + 1.11 * s_12_5) ** (7 / 6)
            + 0.51 * s / (1 + 0.69 * s_12_5) ** (5 / 6)
        ))

    def apply(self, params, tx_mobility, rx_mobility):
        tx_pos = tx_mobility.get_position()
        rx_pos = rx_mobility.get_position()

        h0 = min(tx_pos[2], rx_pos[2])
        h_top = max(tx_pos[2], rx_pos[2])
        zenith = self.compute_zenith_angle(tx_pos, rx_pos)

        out = params.copy()
        out.rytov_variance = self.compute_rytov_variance(params.wavelength, h0, h_top, zenith)
        out.scintillation_index = self.compute_scintillation_index(out.rytov_variance)

        logger.debug(
            f"Scintillation: zenith={np.rad2deg(zenith):.2f} deg, "
            f"rytov={out.rytov_variance:.4e}, index={out.scintillation_index:.4e}"
        )
        return out


class MeanIrradianceModel(PropagationLossModel):
    """
    Mean irradiance of a Gaussian beam at the receiver.

    Beam parameters at the receiver follow from the transmitter beam radius W0
    and phase front radius F0:

        Θ0 = 1 - L/F0,  Λ0 = 2L/(k W0²)
        W = W0 sqrt(Θ0² + Λ0²),  Λ = Λ0 / (Θ0² + Λ0²)

    Turbulence widens the long-term beam, W_LT = W (1 + 1.33 σ_R² Λ^(5/6))^(3/5),
    using the Rytov variance from an upstream scintillation model (0 if none
    ran yet). The mean irradiance is the free-space adjusted power scaled by
    (W / W_LT)².
    """
    provides = frozenset({"rx_beamwidth", "mean_irradiance"})

    def __init__(self, min_distance: float = 1.0, min_beam_radius: float = 1e-6):
        self.min_distance = min_distance
        self.min_beam_radius = min_beam_radius

    def compute_beam_parameters(
        self,
        distance: float,
        wavelength: float,
        beam_radius: float,
        phase_front_radius: float
    ):
        """
        Free-space Gaussian beam radius and Fresnel ratio at the receiver.

        Returns:
            Tuple (W, Λ)
        """
        L = max(distance, self.min_distance)
        w0 = max(beam_radius, self.min_beam_radius)
        k = 2 * np.pi / wavelength

        if phase_front_radius == 0 or np.isinf(phase_front_radius):
            theta0 = 1.0
        else:
            theta0 = 1.0 - L / phase_front_radius
        lambda0 = 2 * L / (k * w0 ** 2)

        denom = theta0 ** 2 + lambda0 ** 2
        return w0 * np.sqrt(denom), lambda0 / denom

    @staticmethod
    def compute_long_term_beamwidth(w: float, fresnel_ratio: float, rytov_variance: float) -> float:
        return w * (1 + 1.33 * rytov_variance * fresnel_ratio ** (5 / 6)) ** (3 / 5)

    def apply(self, params, tx_mobility, rx_mobility):
        distance = tx_mobility.distance_from(rx_mobility)
        w, fresnel_ratio = self.compute_beam_parameters(
            distance,
            params.wavelength,
            params.tx_beamwidth,
            params.tx_phase_front_radius
        )
        rytov = params.rytov_variance or 0.0
        w_lt = self.compute_long_term_beamwidth(w, fresnel_ratio, rytov)

        out = params.copy()
        out.rx_beamwidth = w_lt
        out.mean_irradiance = max(params.power, 0.0) * (w / w_lt) ** 2

        logger.debug(
            f"Mean irradiance: W={w:.4f} m, W_LT={w_lt:.4f} m, "
            f"<I>={out.mean_irradiance:.4e}"
        )
        return out
