"""
Visualization utilities for FSO-SIM.

This module provides visualization functions for:
- Parameter sweeps of corruption rate and outage probability
- Fading sample distributions
"""

import numpy as np
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

__all__ = ["plot_sweep_results", "plot_fading_histogram"]


def plot_sweep_results(
    values: Sequence[float],
    corruption_rates: Sequence[float],
    outage_probabilities: Optional[Sequence[float]] = None,
    xlabel: str = "Parameter",
    save_path: Optional[Union[str, Path]] = None,
    title: str = "Packet Corruption Rate",
    figsize: Tuple[int, int] = (10, 6),
    dpi: int = 150,
    log_scale: bool = True
) -> None:
    """
    Plot simulated corruption rate against a swept parameter.

    Args:
        values: Swept parameter values
        corruption_rates: Monte Carlo corruption rate per value
        outage_probabilities: Optional analytic outage probability per value
        xlabel: X axis label
        save_path: Optional path to save the plot
        title: Plot title
        figsize: Figure size (width, height)
        dpi: Figure DPI for saving
        log_scale: Whether to use a logarithmic y axis
    """
    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)

    ax.plot(values, corruption_rates, 'o-', label="Simulated", linewidth=2)
    if outage_probabilities is not None:
        ax.plot(values, outage_probabilities, 's--', label="Analytic outage", linewidth=2)

    # Zero rates cannot be drawn on a log axis
    rates = np.asarray(corruption_rates, dtype=float)
    if log_scale and np.any(rates > 0):
        ax.set_yscale('log')

    ax.set_xlabel(xlabel, fontsize=12)
    ax.set_ylabel("Corruption probability", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.grid(True, alpha=0.3)
    ax.legend()

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)


def plot_fading_histogram(
    samples: np.ndarray,
    threshold: Optional[float] = None,
    save_path: Optional[Union[str, Path]] = None,
    title: str = "Irradiance Fading",
    bins: int = 100,
    figsize: Tuple[int, int] = (10, 6),
    dpi: int = 150
) -> None:
    """
    Plot the histogram of normalised irradiance samples.

    Args:
        samples: Unit-mean fading samples
        threshold: Optional fading level below which packets are lost
        save_path: Optional path to save the plot
        title: Plot title
        bins: Number of histogram bins
        figsize: Figure size (width, height)
        dpi: Figure DPI for saving
    """
    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    ax.hist(samples, bins=bins, density=True, alpha=0.7, color='steelblue')

    if threshold is not None and np.isfinite(threshold):
        ax.axvline(threshold, color='red', linestyle='--', linewidth=2, label="Detection threshold")
        ax.legend()

    ax.set_xlabel("Normalised irradiance I/<I>", fontsize=12)
    ax.set_ylabel("Probability density", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
