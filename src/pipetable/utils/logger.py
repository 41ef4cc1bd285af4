"""Minimal logging utilities for pipetable.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from pipetable.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Skipping table")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "pipetable." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'pipetable.mymodule'
    """
    if not (name == "pipetable" or name.startswith("pipetable.")):
        name = f"pipetable.{name}"
    return logging.getLogger(name)
