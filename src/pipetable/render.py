"""Canonical text rendering of table rows and delimiter rows.

Canonical form:
- one leading pipe, ``" | "`` between padded cells, one trailing pipe
- padding measured in display width (see ``pipetable.width``)
- delimiter cells built from ``-`` and ``:`` to encode each alignment

Example:
    >>> render_row(("A", "B"), (4, 3), ("left", "center"))
    '| A    |  B  |'
    >>> render_delimiter((4, 3), ("left", "center"))
    '| :--- | :-: |'

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from pipetable.width import display_width

if TYPE_CHECKING:
    from pipetable.layout import TableLayout
    from pipetable.nodes import Alignment


def align_cell(text: str, width: int, alignment: Alignment) -> str:
    """Pad ``text`` with spaces to ``width`` display columns.

    ``right`` pads on the left, ``center`` puts the smaller half on the
    left, anything else pads on the right.
    """
    padding = max(0, width - display_width(text))
    if alignment == "right":
        return " " * padding + text
    if alignment == "center":
        left = padding // 2
        return " " * left + text + " " * (padding - left)
    return text + " " * padding


def delimiter_cell(width: int, alignment: Alignment) -> str:
    """Delimiter marker for one column, always at least one dash."""
    match alignment:
        case "left":
            return ":" + "-" * max(1, width - 1)
        case "right":
            return "-" * max(1, width - 1) + ":"
        case "center":
            return ":" + "-" * max(1, width - 2) + ":"
        case _:
            return "-" * max(1, width)


def cell_fragment(text: str, width: int, alignment: Alignment, *, last: bool) -> str:
    """Source segment one cell occupies: ``| value `` or ``| value |`` when last."""
    content = align_cell(text, width, alignment)
    return f"| {content} |" if last else f"| {content} "


def delimiter_fragment(width: int, alignment: Alignment, *, last: bool) -> str:
    """Source segment one delimiter cell occupies."""
    content = delimiter_cell(width, alignment)
    return f"| {content} |" if last else f"| {content} "


def tail_fragment(text: str, width: int, alignment: Alignment) -> str:
    """Segment appended after an existing closing pipe: `` value |``."""
    return f" {align_cell(text, width, alignment)} |"


def render_row(
    values: Sequence[str], widths: Sequence[int], alignments: Sequence[Alignment]
) -> str:
    """Render one row of values as canonical pipe-delimited text."""
    cells = (
        align_cell(value, widths[i], alignments[i] if i < len(alignments) else None)
        for i, value in enumerate(values)
    )
    return "| " + " | ".join(cells) + " |"


def render_delimiter(widths: Sequence[int], alignments: Sequence[Alignment]) -> str:
    """Render the alignment delimiter row."""
    cells = (
        delimiter_cell(width, alignments[i] if i < len(alignments) else None)
        for i, width in enumerate(widths)
    )
    return "| " + " | ".join(cells) + " |"


def render_table(layout: TableLayout, *, line_prefix: str = "", line_ending: str = "\n") -> str:
    """Render the whole table.

    The first line is not prefixed: it starts where the original table
    started, after its prefix. Every following line repeats ``line_prefix``.
    """
    header, *body = layout.row_values
    lines = [
        render_row(header, layout.widths, layout.alignments),
        line_prefix + render_delimiter(layout.widths, layout.alignments),
    ]
    lines.extend(
        line_prefix + render_row(values, layout.widths, layout.alignments)
        for values in body
    )
    return line_ending.join(lines)
