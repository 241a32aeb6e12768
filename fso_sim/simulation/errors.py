"""
Exception types raised by the FSO link simulation core.

Configuration problems are fatal: they are raised at setup validation or on
first use and are never retried. Stochastic packet corruption is not an
error and never surfaces here.
"""


class FsoSimError(Exception):
    """Base class for all simulation errors."""


class ConfigurationError(FsoSimError):
    """Raised when the channel, phys, loss models or error model are misconfigured."""


class SchedulingError(FsoSimError):
    """Raised when an event is scheduled in the past."""
