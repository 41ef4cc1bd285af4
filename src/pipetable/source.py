"""Helpers that read positional facts out of the shared source buffer.

Nothing here mutates the buffer or the nodes; every function is a pure
lookup used by the layout, rendering and patching stages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipetable.location import SourceRange

if TYPE_CHECKING:
    from pipetable.nodes import Node


def node_range(node: Node, source_length: int | None = None) -> SourceRange | None:
    """Resolve a node's offsets, or None when the host could not supply them.

    Args:
        node: Any node with a ``location``
        source_length: When given, ranges reaching past the buffer are
            treated as unresolvable too

    Returns:
        SourceRange or None
    """
    loc = node.location
    if loc is None or not loc.is_known:
        return None
    if source_length is not None and loc.end_offset > source_length:
        return None
    return loc.range


def line_prefix(source: str, start_offset: int) -> str:
    """Text between the start of the line holding ``start_offset`` and the offset.

    For a table inside a block quote this is ``"> "``; for one nested in a
    list item it is the item's indentation. Every continuation line of a
    re-rendered table repeats it.

    Example:
        >>> line_prefix("x\\n> | a |", 4)
        '> '
    """
    line_start = source.rfind("\n", 0, max(0, start_offset)) + 1
    return source[line_start:start_offset]


def detect_line_ending(text: str) -> str:
    """``"\\r\\n"`` if ``text`` contains one, else ``"\\n"``."""
    return "\r\n" if "\r\n" in text else "\n"


def skip_line_break(source: str, offset: int) -> int | None:
    """Offset just past the line break at ``offset``, or None if there is none."""
    if source.startswith("\r\n", offset):
        return offset + 2
    if source.startswith("\n", offset):
        return offset + 1
    return None


def line_end(source: str, offset: int, limit: int | None = None) -> int:
    """Offset of the line break ending the line that contains ``offset``.

    A ``\\r`` belonging to a ``\\r\\n`` pair is not part of the line. The
    result never exceeds ``limit`` when one is given.
    """
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    elif end > offset and source[end - 1] == "\r":
        end -= 1
    if limit is not None:
        end = min(end, limit)
    return end


def trailing_blank_end(source: str, offset: int) -> int:
    """Offset past the spaces and tabs at ``offset`` if they run to the end of the line.

    Returns ``offset`` unchanged when other text follows the blanks.

    Example:
        >>> trailing_blank_end("| a |  \\n", 5)
        7
        >>> trailing_blank_end("| a  | b", 3)
        3
    """
    end = offset
    while end < len(source) and source[end] in " \t":
        end += 1
    if end == len(source) or source[end] in "\r\n":
        return end
    return offset


def unescaped_pipes(text: str) -> list[int]:
    """Positions of every ``|`` in ``text`` not escaped by a backslash."""
    positions: list[int] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "|":
            positions.append(i)
        i += 1
    return positions


def pipe_segments(text: str) -> list[tuple[int, int]]:
    """Split one table line into per-cell ``(start, end)`` segments.

    Each segment starts at the pipe opening its cell (or at 0 when the line
    has no leading pipe) and runs up to the next cell's pipe. The closing
    pipe, when present, belongs to the last segment.

    Example:
        >>> pipe_segments("| a | b |")
        [(0, 4), (4, 9)]
        >>> pipe_segments("a|b")
        [(0, 1), (1, 3)]
    """
    if not text:
        return []
    pipes = unescaped_pipes(text)
    leading = bool(pipes) and pipes[0] == 0
    closing = bool(pipes) and pipes[-1] == len(text) - 1 and (len(pipes) > 1 or not leading)

    starts = [] if leading else [0]
    starts.extend(pipes[:-1] if closing else pipes)

    segments = [(starts[i], starts[i + 1]) for i in range(len(starts) - 1)]
    segments.append((starts[-1], len(text)))
    return segments
