"""Utility modules for pipetable.

Provides:
- logger: get_logger for namespaced logging
"""

from pipetable.utils.logger import get_logger

__all__ = [
    "get_logger",
]
