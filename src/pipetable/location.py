"""Source location tracking for diagnostics and patching.

Provides SourceLocation for node positions, SourceRange for half-open
offset spans, and LineIndex for converting offsets to line/column pairs.

Thread Safety:
SourceLocation and SourceRange are frozen (immutable) and safe to share
across threads. LineIndex is read-only after construction.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceRange:
    """Half-open ``[start, end)`` span of character offsets into a source buffer.

    Examples:
        >>> r = SourceRange(2, 5)
        >>> r.slice("abcdefg")
        'cde'

    """

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, source: str) -> str:
        """Return the text this range covers in ``source``."""
        return source[self.start : self.end]

    def overlaps(self, other: SourceRange) -> bool:
        """True when the two ranges share at least one offset.

        Two empty ranges at the same offset (insertions) also count as
        overlapping, since their relative order would be ambiguous.
        """
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for diagnostics and debugging.

    Tracks both position in source and optionally the source file path
    for multi-file runs.

    All line/column positions are 1-indexed (lineno and col_offset start at 1).
    ``offset`` and ``end_offset`` are absolute 0-indexed offsets into the
    source buffer.

    Attributes:
        lineno: Starting line number (1-indexed, 0 when unknown)
        col_offset: Starting column offset (1-indexed)
        offset: Absolute start offset in source buffer
        end_offset: Absolute end offset in source buffer
        end_lineno: Ending line number (optional)
        end_col_offset: Ending column offset (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=1, col_offset=1, offset=0, end_offset=9)
        >>> loc.range
        SourceRange(start=0, end=9)

        >>> loc = SourceLocation(1, 1, source_file="docs/guide.md")
        >>> str(loc)
        'docs/guide.md:1:1'

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for messages.

        Returns:
            Formatted string like "file.md:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def is_known(self) -> bool:
        """False for placeholder locations created by :meth:`unknown`."""
        return self.lineno > 0 and 0 <= self.offset <= self.end_offset

    @property
    def range(self) -> SourceRange:
        """Absolute offset span of this location."""
        return SourceRange(self.offset, self.end_offset)

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location.

        Use for nodes created synthetically or when the host could not
        compute an offset.
        """
        return cls(lineno=0, col_offset=0)


class LineIndex:
    """Offset to (line, column) conversion for one source buffer.

    Only used for human-facing diagnostic positions; layout and patching
    work purely on offsets.

    Example:
        >>> index = LineIndex("ab\\ncd")
        >>> index.position(3)
        (2, 1)

    """

    __slots__ = ("_line_starts", "_length")

    def __init__(self, source: str) -> None:
        starts = [0]
        pos = source.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = source.find("\n", pos + 1)
        self._line_starts = starts
        self._length = len(source)

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-indexed ``(line, column)`` of ``offset``.

        Offsets outside the buffer are clamped to its bounds.
        """
        offset = max(0, min(offset, self._length))
        line = bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line] + 1

    def location(
        self, span: SourceRange, *, source_file: str | None = None
    ) -> SourceLocation:
        """Build a full SourceLocation for ``span``."""
        lineno, col = self.position(span.start)
        end_lineno, end_col = self.position(span.end)
        return SourceLocation(
            lineno=lineno,
            col_offset=col,
            offset=span.start,
            end_offset=span.end,
            end_lineno=end_lineno,
            end_col_offset=end_col,
            source_file=source_file,
        )
