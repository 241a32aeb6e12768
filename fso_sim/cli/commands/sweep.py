"""
Parameter sweep command for FSO-SIM CLI.

This module implements the 'sweep' subcommand that reruns the down link
scenario across a range of one configuration parameter and compares the
Monte Carlo corruption rate with the analytic outage probability.
"""

import json
from dataclasses import fields
from pathlib import Path
from typing import Dict, List, Optional

import click
import numpy as np
from tqdm import tqdm

from fso_sim.simulation import DownlinkScenario, LinkConfig

# Parameters that are not plain LinkConfig float fields
DERIVED_PARAMETERS = ("tx_altitude",)


def sweepable_parameters() -> List[str]:
    """Names accepted by --parameter."""
    names = [f.name for f in fields(LinkConfig) if f.type in (float, 'float')]
    return sorted(names) + list(DERIVED_PARAMETERS)


def apply_parameter(config: LinkConfig, name: str, value: float) -> LinkConfig:
    """
    Return a copy of the configuration with one parameter changed.

    Args:
        config: Base configuration
        name: Parameter name (a LinkConfig field or 'tx_altitude')
        value: New value

    Returns:
        New LinkConfig
    """
    data = config.to_dict()
    if name == "tx_altitude":
        data['tx_position'] = [data['tx_position'][0], data['tx_position'][1], value]
    elif name in data:
        data[name] = value
    else:
        raise ValueError(f"Unknown parameter: {name}. Valid parameters: {sweepable_parameters()}")
    return LinkConfig.from_dict(data)


def run_sweep(
    config: LinkConfig,
    parameter: str,
    values: np.ndarray,
    num_packets: int,
    show_progress: bool = True
) -> Dict:
    """
    Run the scenario once per parameter value.

    Returns:
        Dictionary with the values, corruption rates and outage probabilities
    """
    if num_packets < 1:
        raise ValueError("Each sweep point needs at least one packet")
    results = {
        'parameter': parameter,
        'values': [],
        'corruption_rate': [],
        'outage_probability': [],
        'mean_irradiance': [],
        'scintillation_index': [],
    }
    for value in tqdm(values, desc=f"Sweeping {parameter}", disable=not show_progress):
        scenario = DownlinkScenario(apply_parameter(config, parameter, float(value)))
        result = scenario.run(num_packets=num_packets)

        results['values'].append(float(value))
        results['corruption_rate'].append(result.corruption_rate)
        results['outage_probability'].append(result.outage_probability)
        results['mean_irradiance'].append(result.rx_params.mean_irradiance)
        results['scintillation_index'].append(result.rx_params.scintillation_index)
    return results


@click.command()
@click.option(
    "--parameter", "-p",
    type=str,
    required=True,
    help="Configuration parameter to sweep (e.g. rms_wind_speed, tx_altitude)"
)
@click.option(
    "--range", "value_range",
    type=(float, float),
    required=True,
    help="Parameter range (min, max)"
)
@click.option(
    "--steps",
    type=int,
    default=10,
    help="Number of sweep points"
)
@click.option(
    "--num-packets", "-n",
    type=click.IntRange(min=1),
    default=1000,
    help="Packets per sweep point"
)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Base link configuration file (JSON or YAML)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    help="Save sweep results to this JSON file"
)
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    help="Save a plot of the sweep to this file"
)
@click.pass_context
def sweep(
    ctx,
    parameter: str,
    value_range,
    steps: int,
    num_packets: int,
    config_path: Optional[Path],
    output: Optional[Path],
    plot: Optional[Path]
):
    """
    Sweep one link parameter and report the packet corruption rate.
    """
    logger = ctx.obj['logger']
    logger.info(f"Sweeping {parameter} over {value_range} in {steps} steps")
    logger.info(f"Packets per point: {num_packets}")

    try:
        config = LinkConfig.load(config_path) if config_path else LinkConfig()
        values = np.linspace(value_range[0], value_range[1], steps)
        results = run_sweep(config, parameter, values, num_packets)

        for value, rate, outage in zip(
            results['values'], results['corruption_rate'], results['outage_probability']
        ):
            logger.info(f"{parameter}={value:.4g}: rate={rate:.4e}, outage={outage:.4e}")

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            with open(output, 'w') as f:
                json.dump(results, f, indent=2)
            logger.info(f"Sweep results saved to: {output}")

        if plot:
            from fso_sim.utils.visualization import plot_sweep_results

            plot_sweep_results(
                results['values'],
                results['corruption_rate'],
                results['outage_probability'],
                xlabel=parameter,
                save_path=plot,
            )
            logger.info(f"Sweep plot saved to: {plot}")

    except Exception as e:
        logger.error(f"Sweep failed: {e}")
        ctx.exit(1)
