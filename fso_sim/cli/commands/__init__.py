"""
CLI command modules.

This package contains the implementation of all CLI subcommands:
- run: Down link scenario simulation
- sweep: Parameter sweep of corruption rate and outage probability
"""

from . import run, sweep

__all__ = ["run", "sweep"]
