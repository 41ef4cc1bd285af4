"""Column layout for a single table.

Two passes over the table: the first extracts every cell's literal text,
the second sizes each column. Widths cannot be known until every row has
been seen, so there is no streaming variant.

Example:
    >>> from pipetable.parsing import parse
    >>> source = "| A | B |\\n| - | :-: |\\n| long | x |"
    >>> layout = build_layout(parse(source).children[0], source)
    >>> layout.widths
    (4, 3)

Thread Safety:
    A TableLayout is frozen and built fresh per table; nothing is cached
    between calls.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pipetable.config import get_config
from pipetable.nodes import CodeSpan, HtmlInline, Text
from pipetable.source import node_range
from pipetable.width import display_width

if TYPE_CHECKING:
    from pipetable.nodes import Alignment, Inline, Table, TableCell

_BACKTICK_RUN = re.compile(r"`+")


@dataclass(frozen=True, slots=True)
class TableLayout:
    """Canonical layout of one table.

    Attributes:
        column_count: Declared column count (never zero)
        widths: Display width of every column
        alignments: Alignment of every column, ``None`` where no hint exists
        row_values: Cell text per row, each padded to ``column_count``

    """

    column_count: int
    widths: tuple[int, ...]
    alignments: tuple[Alignment, ...]
    row_values: tuple[tuple[str, ...], ...]


def cell_text(cell: TableCell, source: str) -> str:
    """Literal text of a cell, trimmed.

    Slices from the first child's start to the last child's end so the
    pipe-adjacent padding never leaks into the value. If the outer children
    cannot be resolved, each child contributes its own source slice, or its
    Markdown literal when it has no offsets either.
    """
    if not cell.children:
        return ""

    first = node_range(cell.children[0], len(source))
    last = node_range(cell.children[-1], len(source))
    if first is not None and last is not None and first.start <= last.end:
        return source[first.start : last.end].strip()

    parts = []
    for child in cell.children:
        span = node_range(child, len(source))
        parts.append(span.slice(source) if span is not None else inline_literal(child))
    return "".join(parts).strip()


def inline_literal(node: Inline) -> str:
    """Markdown text that reproduces an inline node without its source.

    Example:
        >>> from pipetable.location import SourceLocation
        >>> inline_literal(CodeSpan(location=SourceLocation.unknown(), code="a`b"))
        '``a`b``'

    """
    match node:
        case Text(content=content):
            return content
        case CodeSpan(code=code):
            fence = "`" * (max((len(run) for run in _BACKTICK_RUN.findall(code)), default=0) + 1)
            return f"{fence}{code}{fence}"
        case HtmlInline(html=html):
            return html


def build_layout(
    table: Table, source: str, *, min_width: int | None = None
) -> TableLayout | None:
    """Compute widths, alignments and padded row values for ``table``.

    Args:
        table: Table node supplied by the host
        source: Full source buffer the node offsets point into
        min_width: Narrowest allowed column; defaults to the active
            config's ``min_column_width``

    Returns:
        TableLayout, or None for a table with no rows or no columns
    """
    rows = table.rows
    if not rows:
        return None

    column_count = table.column_count
    if column_count == 0:
        return None

    if min_width is None:
        min_width = get_config().min_column_width

    row_values: list[tuple[str, ...]] = []
    for row in rows:
        values = [cell_text(cell, source) for cell in row.cells]
        values.extend("" for _ in range(column_count - len(values)))
        row_values.append(tuple(values))

    widths = tuple(
        max(min_width, max(display_width(values[col]) for values in row_values))
        for col in range(column_count)
    )
    alignments = tuple(
        table.alignments[col] if col < len(table.alignments) else None
        for col in range(column_count)
    )

    return TableLayout(
        column_count=column_count,
        widths=widths,
        alignments=alignments,
        row_values=tuple(row_values),
    )
