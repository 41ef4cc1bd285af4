"""Exception classes for pipetable.

The formatting engine itself never raises on malformed-but-parseable
tables; these exceptions cover configuration and the fix-application
layer around it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pipetable.patches import Patch


class PipetableError(Exception):
    """Base exception for all pipetable errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(PipetableError):
    """Invalid configuration value.

    Raised when a FormatConfig field or a ``[tool.pipetable]`` entry is
    out of range or of the wrong type.
    """

    def __init__(self, key: str, message: str) -> None:
        """Initialize config error.

        Args:
            key: Offending setting (or file path for unreadable files)
            message: Description of the problem
        """
        self.key = key
        super().__init__(f"Config '{key}': {message}")


class PatchConflictError(PipetableError):
    """Two patches in one batch edit overlapping ranges.

    Patches are computed against a single snapshot and must be applied as
    one batch; overlapping edits mean they were mixed from different
    snapshots.
    """

    def __init__(self, first: Patch, second: Patch) -> None:
        """Initialize conflict error.

        Args:
            first: Earlier patch in source order
            second: Patch whose edit range overlaps ``first``
        """
        self.first = first
        self.second = second
        a, b = first.edit_range, second.edit_range
        super().__init__(
            f"Overlapping edits [{a.start}, {a.end}) and [{b.start}, {b.end})"
        )
