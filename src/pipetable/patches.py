"""Minimal edit generation for table reformatting.

Compares the canonical rendering of a table against its source text and
emits the smallest set of edits that make it canonical:

1. Cells: every row whose cell count equals the column count is compared
   one cell segment at a time. Only segments that differ are patched.
2. Short rows: cells present are patched as above and the missing
   trailing cells are inserted after the row's closing pipe. Rows that
   cannot be decomposed (no closing pipe, unresolvable cells) are
   replaced as a whole.
3. Delimiter row: located on the line after the header row and split on
   unescaped pipes, then patched segment by segment, by insertion, or as a
   whole line, following the same rules as body rows.
4. Whole table: only when no row or cell carries any position at all.

Every path treats spaces and tabs after a row's last character as part of
the row, so canonical lines never end in blanks.

Patches are returned in source-offset order and never overlap, so the
whole list can be applied as one batch against the original snapshot.

Example:
    >>> from pipetable.parsing import parse
    >>> source = "| A | B |\\n| --- | --- |\\n| 1 | 2 |"
    >>> [p.replacement for p in generate_patches(parse(source).children[0], source)]
    ['| A   ', '| B   |', '| 1   ', '| 2   |']

Thread Safety:
    Pure functions of (table, source). Safe to call from any thread.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pipetable.layout import TableLayout, build_layout
from pipetable.location import SourceRange
from pipetable.parsing.charsets import DELIMITER_ROW_CHARS
from pipetable.render import (
    cell_fragment,
    delimiter_cell,
    delimiter_fragment,
    render_delimiter,
    render_row,
    render_table,
    tail_fragment,
)
from pipetable.source import (
    detect_line_ending,
    line_end,
    line_prefix,
    node_range,
    pipe_segments,
    skip_line_break,
    trailing_blank_end,
)
from pipetable.utils.logger import get_logger

if TYPE_CHECKING:
    from pipetable.nodes import Table, TableCell, TableRow

_logger = get_logger(__name__)

# Container prefix characters ahead of a delimiter row (quote markers, indentation).
_PREFIX_CHARS = frozenset("> \t")


@dataclass(frozen=True, slots=True)
class Patch:
    """One atomic edit.

    Attributes:
        edit_range: Source span replaced by ``replacement`` (empty for insertions)
        replacement: Canonical text for the span
        report_range: Span to point diagnostics at; excludes an opening pipe
            that is already correct

    """

    edit_range: SourceRange
    replacement: str
    report_range: SourceRange

    @property
    def is_insertion(self) -> bool:
        return self.edit_range.start == self.edit_range.end


def generate_patches(
    table: Table,
    source: str,
    *,
    layout: TableLayout | None = None,
    logger: logging.Logger | None = None,
) -> list[Patch]:
    """Compute the edits that bring ``table`` to canonical form.

    Args:
        table: Table node supplied by the host
        source: Immutable source snapshot the node offsets refer to
        layout: Precomputed layout (built from ``table`` when omitted)
        logger: Receives debug records for skipped units

    Returns:
        Non-overlapping patches sorted by offset; empty when the table is
        already canonical, degenerate or has no resolvable range
    """
    log = logger or _logger

    table_span = node_range(table, len(source))
    if table_span is None:
        log.debug("Skipping table without resolvable offsets")
        return []

    if layout is None:
        layout = build_layout(table, source)
    if layout is None:
        log.debug("Skipping degenerate table at offset %d", table_span.start)
        return []

    if not _has_positions(table, source):
        return _whole_table_patches(table_span, layout, source)

    patches: list[Patch] = []
    for index, row in enumerate(table.rows):
        patches.extend(_row_patches(row, layout.row_values[index], layout, source, log))
    patches.extend(_delimiter_patches(table, table_span, layout, source, log))

    patches.sort(key=lambda p: (p.edit_range.start, p.edit_range.end))
    return patches


# =============================================================================
# Body and header rows
# =============================================================================


def _row_patches(
    row: TableRow,
    values: tuple[str, ...],
    layout: TableLayout,
    source: str,
    log: logging.Logger,
) -> list[Patch]:
    count = len(row.cells)
    segments = [
        _cell_segment(cell, source, last=i == count - 1) for i, cell in enumerate(row.cells)
    ]
    resolved = bool(segments) and all(span is not None for span in segments)

    if resolved and count == layout.column_count:
        segments[-1] = _through_trailing_blanks(segments[-1], source)
        patches: list[Patch] = []
        for col, span in enumerate(segments):
            expected = cell_fragment(
                values[col],
                layout.widths[col],
                layout.alignments[col],
                last=col == layout.column_count - 1,
            )
            patch = _diff(span, expected, source)
            if patch is not None:
                patches.append(patch)
        return patches

    if resolved and count < layout.column_count and _ends_with_pipe(segments[-1], source):
        return _short_row_patches(segments, values, layout, source)

    return _replace_row(row, segments, values, layout, source, log)


def _short_row_patches(
    segments: list[SourceRange | None],
    values: tuple[str, ...],
    layout: TableLayout,
    source: str,
) -> list[Patch]:
    """Patch the cells present, then insert the missing ones after the closing pipe.

    Blanks after the closing pipe are replaced by the inserted cells.
    """
    count = len(segments)
    patches: list[Patch] = []
    for col, span in enumerate(segments):
        expected = cell_fragment(
            values[col], layout.widths[col], layout.alignments[col], last=col == count - 1
        )
        patch = _diff(span, expected, source)
        if patch is not None:
            patches.append(patch)

    last = segments[-1]
    tail = "".join(
        tail_fragment(values[col], layout.widths[col], layout.alignments[col])
        for col in range(count, layout.column_count)
    )
    edit = SourceRange(last.end, trailing_blank_end(source, last.end))
    patches.append(Patch(edit, tail, last))
    return patches


def _replace_row(
    row: TableRow,
    segments: list[SourceRange | None],
    values: tuple[str, ...],
    layout: TableLayout,
    source: str,
    log: logging.Logger,
) -> list[Patch]:
    row_span = node_range(row, len(source))
    if row_span is None:
        log.debug("Skipping row without resolvable offsets")
        return []

    edit = _through_trailing_blanks(row_span, source)
    expected = render_row(values, layout.widths, layout.alignments)
    if edit.slice(source) == expected:
        return []

    report = next((span for span in segments if span is not None), row_span)
    return [Patch(edit, expected, report)]


def _cell_segment(cell: TableCell, source: str, *, last: bool) -> SourceRange | None:
    """Source span of a cell including its opening pipe (and closing pipe if last).

    Hosts that exclude the pipes from cell ranges get them added back here.
    """
    span = node_range(cell, len(source))
    if span is None:
        return None
    start, end = span.start, span.end
    if start > 0 and source[start - 1] == "|" and not source.startswith("|", start):
        start -= 1
    if last and end < len(source) and source[end] == "|" and source[end - 1 : end] != "|":
        end += 1
    return SourceRange(start, end)


def _ends_with_pipe(span: SourceRange, source: str) -> bool:
    return span.end > span.start and source[span.end - 1] == "|"


def _through_trailing_blanks(span: SourceRange, source: str) -> SourceRange:
    return SourceRange(span.start, trailing_blank_end(source, span.end))


# =============================================================================
# Delimiter row
# =============================================================================


def _delimiter_patches(
    table: Table,
    table_span: SourceRange,
    layout: TableLayout,
    source: str,
    log: logging.Logger,
) -> list[Patch]:
    line = _locate_delimiter(table, table_span, source)
    if line is None:
        log.debug("No delimiter row found after header at offset %d", table_span.start)
        return []

    text = line.slice(source)
    segments = [
        SourceRange(line.start + start, line.start + end) for start, end in pipe_segments(text)
    ]
    columns = layout.column_count
    blank_end = trailing_blank_end(source, line.end)

    if len(segments) == columns:
        segments[-1] = SourceRange(segments[-1].start, blank_end)
        patches: list[Patch] = []
        for col, span in enumerate(segments):
            expected = delimiter_fragment(
                layout.widths[col], layout.alignments[col], last=col == columns - 1
            )
            patch = _diff(span, expected, source)
            if patch is not None:
                patches.append(patch)
        return patches

    if 0 < len(segments) < columns and text.endswith("|"):
        patches = []
        for col, span in enumerate(segments):
            expected = delimiter_fragment(
                layout.widths[col], layout.alignments[col], last=col == len(segments) - 1
            )
            patch = _diff(span, expected, source)
            if patch is not None:
                patches.append(patch)
        tail = "".join(
            f" {delimiter_cell(layout.widths[col], layout.alignments[col])} |"
            for col in range(len(segments), columns)
        )
        patches.append(Patch(SourceRange(line.end, blank_end), tail, segments[-1]))
        return patches

    edit = SourceRange(line.start, blank_end)
    expected = render_delimiter(layout.widths, layout.alignments)
    if edit.slice(source) == expected:
        return []
    report = segments[0] if segments else line
    return [Patch(edit, expected, report)]


def _locate_delimiter(table: Table, table_span: SourceRange, source: str) -> SourceRange | None:
    """Span of the delimiter row's own text on the line after the header row.

    Excludes the container prefix and trailing whitespace, mirroring how row
    ranges are reported.
    """
    if not table.rows:
        return None
    header_span = node_range(table.rows[0], len(source))
    if header_span is None:
        return None

    eol = line_end(source, header_span.end)
    if source[header_span.end : eol].strip():
        return None
    start = skip_line_break(source, eol)
    if start is None or start > table_span.end:
        return None

    stop = line_end(source, start, limit=table_span.end)
    while start < stop and source[start] in _PREFIX_CHARS:
        start += 1
    while stop > start and source[stop - 1] in " \t":
        stop -= 1
    if start == stop:
        return None

    if not set(source[start:stop]) <= DELIMITER_ROW_CHARS or "-" not in source[start:stop]:
        return None
    return SourceRange(start, stop)


# =============================================================================
# Whole table
# =============================================================================


def _has_positions(table: Table, source: str) -> bool:
    length = len(source)
    for row in table.rows:
        if node_range(row, length) is not None:
            return True
        if any(node_range(cell, length) is not None for cell in row.cells):
            return True
    return False


def _whole_table_patches(
    table_span: SourceRange, layout: TableLayout, source: str
) -> list[Patch]:
    edit = _through_trailing_blanks(table_span, source)
    original = edit.slice(source)
    rendered = render_table(
        layout,
        line_prefix=line_prefix(source, table_span.start),
        line_ending=detect_line_ending(original),
    )
    if rendered == original:
        return []
    return [Patch(edit, rendered, table_span)]


def _diff(span: SourceRange, expected: str, source: str) -> Patch | None:
    actual = span.slice(source)
    if actual == expected:
        return None
    report = span
    if len(span) > 1 and actual.startswith("|") and expected.startswith("|"):
        report = SourceRange(span.start + 1, span.end)
    return Patch(span, expected, report)
