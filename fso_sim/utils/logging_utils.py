"""
Logging utilities for FSO-SIM.

Library modules log through logging.getLogger(__name__), so everything below
the "fso_sim" logger is configured here. Channels and phys log each
transmission at INFO; loss models and error models log their computed values
at DEBUG, which is what --verbose turns on.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "fso_sim"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure a logger with a console handler and an optional file handler.

    Existing handlers are replaced, so calling this again (e.g. once per CLI
    invocation) does not duplicate output.

    Args:
        name: Logger name
        level: Logging level name or number
        log_file: Optional file path for logging output
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    set_level(level, name)
    return logger


def set_level(level: Union[str, int], name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Change the level of a logger and of all its handlers.

    Args:
        level: Logging level name or number
        name: Logger name

    Returns:
        The logger
    """
    numeric = _to_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(numeric)
    for handler in logger.handlers:
        handler.setLevel(numeric)
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger below the package logger."""
    return logging.getLogger(name)
