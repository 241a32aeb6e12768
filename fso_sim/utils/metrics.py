"""
Metrics utilities for FSO-SIM link evaluation.

This module provides functions to summarise link budgets and packet
corruption statistics from simulation runs.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
from scipy import stats

from ..simulation.signal import Packet, SignalParameters

logger = logging.getLogger(__name__)

__all__ = ["corruption_rate", "wilson_interval", "link_budget_db", "watts_to_dbm"]


def watts_to_dbm(power: float) -> float:
    """Convert power in W to dBm; zero or negative power maps to -inf."""
    if power <= 0:
        return -np.inf
    return 10 * np.log10(power) + 30


def corruption_rate(packets: Iterable[Packet]) -> float:
    """
    Fraction of packets marked corrupted.

    Args:
        packets: Delivered packets

    Returns:
        Rate in [0, 1], 0 for an empty collection
    """
    flags = [p.is_corrupted for p in packets]
    if not flags:
        return 0.0
    return sum(flags) / len(flags)


def wilson_interval(successes: int, trials: int, confidence: float = 0.99) -> Tuple[float, float]:
    """
    Wilson score confidence interval for a binomial proportion.

    Args:
        successes: Number of positive outcomes (e.g. corrupted packets)
        trials: Number of trials
        confidence: Two-sided confidence level

    Returns:
        Tuple (lower, upper)
    """
    if trials <= 0:
        raise ValueError("Number of trials must be positive")
    if not 0 <= successes <= trials:
        raise ValueError(f"Successes must be in [0, {trials}], got {successes}")

    z = stats.norm.ppf(0.5 + confidence / 2)
    p = successes / trials
    denom = 1 + z ** 2 / trials
    centre = (p + z ** 2 / (2 * trials)) / denom
    half_width = z * np.sqrt(p * (1 - p) / trials + z ** 2 / (4 * trials ** 2)) / denom
    return max(0.0, centre - half_width), min(1.0, centre + half_width)


def link_budget_db(
    params: SignalParameters,
    tx_power: float,
    tx_gain_db: float,
    rx_gain_db: float,
    rx_sensitivity_dbm: Optional[float] = None
) -> Dict[str, float]:
    """
    Link budget breakdown for a set of received signal parameters.

    Args:
        params: Parameters after the channel loss chain
        tx_power: Laser transmit power in W
        tx_gain_db: Laser gain in dB
        rx_gain_db: Receiver gain in dB
        rx_sensitivity_dbm: Optional receiver sensitivity for the link margin

    Returns:
        Dictionary of budget terms in dB / dBm
    """
    budget = {
        'tx_power_dbm': watts_to_dbm(tx_power),
        'tx_gain_db': tx_gain_db,
        'free_space_loss_db': params.path_loss_db if params.path_loss_db is not None else 0.0,
        'rx_gain_db': rx_gain_db,
    }

    if params.mean_irradiance is not None and params.power > 0:
        if params.mean_irradiance > 0:
            budget['turbulence_spread_loss_db'] = -10 * np.log10(params.mean_irradiance / params.power)
        else:
            budget['turbulence_spread_loss_db'] = np.inf
        mean_power = params.mean_irradiance
    else:
        budget['turbulence_spread_loss_db'] = 0.0
        mean_power = params.power

    budget['mean_rx_power_dbm'] = watts_to_dbm(mean_power) + rx_gain_db

    if params.scintillation_index is not None:
        budget['scintillation_index'] = params.scintillation_index
        budget['scintillation_fade_db'] = 10 * np.log10(1 + params.scintillation_index)

    if rx_sensitivity_dbm is not None:
        budget['rx_sensitivity_dbm'] = rx_sensitivity_dbm
        budget['link_margin_db'] = budget['mean_rx_power_dbm'] - rx_sensitivity_dbm
        if budget['link_margin_db'] < 0:
            logger.warning(f"Negative link margin: {budget['link_margin_db']:.2f} dB")

    return budget
