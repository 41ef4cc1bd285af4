"""Table detection for the pipetable parser.

Handles GFM (GitHub Flavored Markdown) pipe tables, recording exact offsets
for every table, row and cell so the formatter can patch them in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipetable.location import SourceLocation
from pipetable.nodes import Alignment, Inline, Table, TableCell, TableRow
from pipetable.parsing.charsets import DELIMITER_ROW_CHARS, LINE_PADDING
from pipetable.source import pipe_segments, unescaped_pipes

if TYPE_CHECKING:
    from pipetable.parsing.lines import Line


class TableParsingMixin:
    """Mixin for GFM table parsing.

    Required Host Attributes:
        - _source: str
        - _source_file: str | None

    Required Host Methods:
        - _parse_cell_inlines(start, end, lineno, line_start) -> tuple[Inline, ...]
        - _fence_opener(line) -> str | None

    """

    _source: str
    _source_file: str | None

    def _try_parse_table(self, lines: list[Line], index: int) -> tuple[Table, int] | None:
        """Try to parse a table whose header row is ``lines[index]``.

        GFM table structure:
        | Header 1 | Header 2 |   <- header row
        |----------|----------|   <- delimiter row (required)
        | Cell 1   | Cell 2   |   <- body rows

        Header and delimiter cell counts are not required to match; the
        formatter repairs missing delimiter cells.

        Returns:
            ``(table, next_index)`` or None if no table starts here
        """
        if index + 1 >= len(lines):
            return None
        header_line = lines[index]
        delimiter_line = lines[index + 1]
        if header_line.indent > 3 or delimiter_line.quote_depth != header_line.quote_depth:
            return None

        source = self._source
        header_text = header_line.content(source)
        if not unescaped_pipes(header_text):
            return None

        header_cells = pipe_segments(header_text)
        alignments = self._parse_table_delimiter(
            delimiter_line.content(source), len(header_cells)
        )
        if alignments is None:
            return None

        rows = [self._parse_table_row(header_line, is_header=True)]
        next_index = index + 2
        while next_index < len(lines):
            line = lines[next_index]
            if line.quote_depth != header_line.quote_depth or line.is_blank(source):
                break
            if self._fence_opener(line) is not None:
                break
            if not unescaped_pipes(line.content(source)):
                break
            rows.append(self._parse_table_row(line, is_header=False))
            next_index += 1

        last_line = lines[next_index - 1]
        start = rows[0].location.offset
        end = last_line.content_end(source)
        location = SourceLocation(
            lineno=header_line.lineno,
            col_offset=start - header_line.start + 1,
            offset=start,
            end_offset=end,
            end_lineno=last_line.lineno,
            end_col_offset=end - last_line.start + 1,
            source_file=self._source_file,
        )
        table = Table(
            location=location,
            head=(rows[0],),
            body=tuple(rows[1:]),
            alignments=alignments,
        )
        return table, next_index

    def _parse_table_row(self, line: Line, *, is_header: bool) -> TableRow:
        """Parse one row line into a TableRow with per-cell offsets."""
        source = self._source
        text = line.content(source)
        base = line.content_start
        segments = pipe_segments(text)
        pipes = unescaped_pipes(text)
        closing = len(text) - 1 if pipes and pipes[-1] == len(text) - 1 else -1

        cells: list[TableCell] = []
        for i, (seg_start, seg_end) in enumerate(segments):
            start = base + seg_start
            end = base + seg_end
            inner_start = start + 1 if text.startswith("|", seg_start) else start
            inner_end = end
            if i == len(segments) - 1 and closing > seg_start:
                inner_end = end - 1
            children: tuple[Inline, ...] = self._parse_cell_inlines(  # type: ignore[attr-defined]
                inner_start, inner_end, line.lineno, line.start
            )
            cells.append(
                TableCell(
                    location=self._line_location(line, start, end),
                    children=children,
                )
            )

        return TableRow(
            location=self._line_location(line, base, base + len(text)),
            cells=tuple(cells),
            is_header=is_header,
        )

    def _parse_table_delimiter(
        self, line: str, header_cols: int
    ) -> tuple[Alignment, ...] | None:
        """Parse table delimiter row and extract alignments.

        Delimiter format: |:---|:---:|---:|
        Returns tuple of alignments ('left', 'center', 'right', None).
        Returns None if not a valid delimiter row.
        """
        if not line or not set(line) <= DELIMITER_ROW_CHARS:
            return None

        segments = pipe_segments(line)
        # Without any pipe the row must mirror the header, or `a | b` over
        # `---` would be taken for a table instead of a setext heading.
        if "|" not in line and len(segments) != header_cols:
            return None

        alignments: list[Alignment] = []
        for seg_start, seg_end in segments:
            part = line[seg_start:seg_end].strip(LINE_PADDING + "|")

            has_left_colon = part.startswith(":")
            has_right_colon = part.endswith(":") and len(part) > 1

            inner = part
            if has_left_colon:
                inner = inner[1:]
            if has_right_colon:
                inner = inner[:-1]

            # Must have at least one dash
            if not inner or not all(c == "-" for c in inner):
                return None

            if has_left_colon and has_right_colon:
                alignments.append("center")
            elif has_left_colon:
                alignments.append("left")
            elif has_right_colon:
                alignments.append("right")
            else:
                alignments.append(None)

        if not alignments:
            return None

        return tuple(alignments)

    def _line_location(self, line: Line, start: int, end: int) -> SourceLocation:
        return SourceLocation(
            lineno=line.lineno,
            col_offset=start - line.start + 1,
            offset=start,
            end_offset=end,
            end_lineno=line.lineno,
            end_col_offset=end - line.start + 1,
            source_file=self._source_file,
        )
