"""
Utility functions and helper modules.

This module provides:
- Link budget and corruption statistics
- Visualization tools
- Logging utilities
"""

from .visualization import *
from .metrics import *
from .logging_utils import setup_logger, set_level, get_logger

__all__ = [
    "setup_logger",
    "set_level",
    "get_logger",
    "plot_sweep_results",
    "plot_fading_histogram",
    "corruption_rate",
    "wilson_interval",
    "link_budget_db",
    "watts_to_dbm",
]
