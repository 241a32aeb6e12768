"""
Command Line Interface module.

This module provides the main CLI entry points for:
- Running the down link scenario
- Sweeping a link parameter
"""

from .main import cli
from .commands import *

__all__ = ["cli"]
