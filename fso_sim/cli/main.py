#!/usr/bin/env python3
"""
Main CLI entry point for FSO-SIM.

This module provides the main command-line interface with subcommands for:
- run: Simulate packets over the satellite to ground station link
- sweep: Sweep one link parameter and report corruption statistics
"""

import click

from fso_sim.utils.logging_utils import set_level, setup_logger
from fso_sim.cli.commands import run, sweep


@click.group()
@click.option(
    "--verbose", "-v", 
    is_flag=True, 
    help="Enable verbose logging"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Log file path (default: logs to console)"
)
@click.pass_context
def cli(ctx, verbose, log_file):
    """
    FSO-SIM: Discrete-event simulation of free-space optical down links.
    
    Models a satellite laser terminal and an optical ground station connected
    by a channel of free space, scintillation and mean irradiance loss models.
    """
    ctx.ensure_object(dict)
    
    logger = setup_logger(log_file=log_file)
    if verbose:
        set_level("DEBUG")
    ctx.obj['logger'] = logger
    
    ctx.obj['verbose'] = verbose
    ctx.obj['log_file'] = log_file
    
    logger.debug("FSO-SIM CLI started")


cli.add_command(run.run)
cli.add_command(sweep.sweep)


@cli.command()
@click.pass_context
def version(ctx):
    """Show version information."""
    from fso_sim import __version__
    logger = ctx.obj['logger']
    logger.info(f"FSO-SIM version {__version__}")


@cli.command()
@click.pass_context
def info(ctx):
    """Show system and package information."""
    import platform
    import numpy as np
    import scipy
    
    logger = ctx.obj['logger']
    logger.info("=== FSO-SIM System Information ===")
    logger.info(f"Python version: {platform.python_version()}")
    logger.info(f"Platform: {platform.platform()}")
    logger.info(f"NumPy version: {np.__version__}")
    logger.info(f"SciPy version: {scipy.__version__}")


if __name__ == "__main__":
    cli()
