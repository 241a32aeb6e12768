"""
Scenario run command for FSO-SIM CLI.

This module implements the 'run' subcommand that sends packets from the
satellite to the ground station and reports the link budget and packet
corruption statistics.
"""

import json
import time
from pathlib import Path
from typing import Optional

import click
import numpy as np


@click.command()
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Link configuration file (JSON or YAML)"
)
@click.option(
    "--num-packets", "-n",
    type=int,
    default=1,
    help="Number of packets to send"
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the error model (overrides the configuration)"
)
@click.option(
    "--distribution",
    type=click.Choice(["lognormal", "gamma-gamma"]),
    default=None,
    help="Fading distribution (overrides the configuration)"
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(path_type=Path),
    help="Directory for summary.json and the configuration used"
)
@click.option(
    "--plot-fading",
    type=click.Path(path_type=Path),
    help="Save a histogram of fading samples to this file"
)
@click.option(
    "--fading-samples",
    type=int,
    default=10000,
    help="Number of fading samples for the histogram"
)
@click.pass_context
def run(
    ctx,
    config_path: Optional[Path],
    num_packets: int,
    seed: Optional[int],
    distribution: Optional[str],
    output_dir: Optional[Path],
    plot_fading: Optional[Path],
    fading_samples: int
):
    """
    Run the satellite to ground station down link scenario.
    """
    logger = ctx.obj['logger']

    try:
        from fso_sim.simulation import DownlinkScenario, LinkConfig
        from fso_sim.utils.metrics import link_budget_db, wilson_interval

        config = LinkConfig.load(config_path) if config_path else LinkConfig()
        if seed is not None:
            config.seed = seed
        if distribution is not None:
            config.fading_distribution = distribution

        logger.info(f"Link distance: {config.link_distance / 1000:.1f} km")
        logger.info(f"Wavelength: {config.wavelength * 1e9:.0f} nm")
        logger.info(f"Bit rate: {config.bit_rate / 1e6:.4f} Mbit/s")
        logger.info(f"Packet size: {config.packet_size} bytes")
        logger.info(f"Fading distribution: {config.fading_distribution}")

        scenario = DownlinkScenario(config)

        start_time = time.time()
        result = scenario.run(num_packets=num_packets)
        elapsed_time = time.time() - start_time

        budget = {}
        if result.rx_params is not None:
            budget = link_budget_db(
                result.rx_params,
                tx_power=config.tx_power,
                tx_gain_db=config.tx_gain_db,
                rx_gain_db=config.rx_gain_db,
                rx_sensitivity_dbm=config.rx_sensitivity_dbm,
            )
            logger.info("=== Link Budget ===")
            for name, value in budget.items():
                logger.info(f"{name}: {value:.4f}")

        logger.info(f"Propagation delay: {result.propagation_delay * 1e3:.4f} ms")
        logger.info(
            f"Corrupted packets: {result.packets_corrupted}/{result.packets_received} "
            f"(analytic outage {result.outage_probability:.4e})"
        )
        if result.packets_received > 0:
            lower, upper = wilson_interval(result.packets_corrupted, result.packets_received)
            logger.info(f"Corruption rate 99% interval: [{lower:.4e}, {upper:.4e}]")
        logger.info(f"Simulation completed in {elapsed_time:.2f} seconds")

        if plot_fading and result.rx_params is not None:
            from fso_sim.utils.visualization import plot_fading_histogram

            samples = np.array([
                scenario.error_model.sample_fading(result.rx_params)
                for _ in range(fading_samples)
            ])
            plot_fading_histogram(
                samples,
                threshold=scenario.error_model.fading_threshold(result.rx_params),
                save_path=plot_fading,
            )
            logger.info(f"Fading histogram saved to: {plot_fading}")

        if output_dir:
            output_dir.mkdir(parents=True, exist_ok=True)
            summary = {
                'result': result.to_dict(),
                'link_budget': budget,
                'elapsed_time': elapsed_time,
            }
            with open(output_dir / "summary.json", 'w') as f:
                json.dump(summary, f, indent=2, default=float)
            config.save(output_dir / "config.json")
            logger.info(f"Results saved to: {output_dir}")

    except Exception as e:
        logger.error(f"Simulation failed: {e}")
        ctx.exit(1)
