"""Line-oriented parser locating pipe tables in Markdown.

Produces the syntax tree the formatter consumes: tables, rows, cells and
cell inlines, each with exact source offsets. Everything that is not a
table is skipped; fenced code blocks are stepped over so tables shown as
code examples are left alone.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `LineScanningMixin`: Line splitting, container prefixes, fences
- `TableParsingMixin`: Header/delimiter/body row recognition
- `InlineParsingMixin`: Cell content (code spans, inline HTML, text)

Thread Safety:
- Parser produces immutable nodes (frozen dataclasses)
- Safe to share the resulting Document across threads

"""

from __future__ import annotations

from pipetable.location import SourceLocation
from pipetable.nodes import Table
from pipetable.parsing import InlineParsingMixin, LineScanningMixin, TableParsingMixin
from pipetable.utils.logger import get_logger

logger = get_logger(__name__)


class Parser(
    LineScanningMixin,
    TableParsingMixin,
    InlineParsingMixin,
):
    """Table-locating parser for Markdown.

    Usage:
        >>> parser = Parser("| a | b |\\n| - | - |")
        >>> tables = parser.parse()
        >>> len(tables[0].rows)
        1

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. The resulting nodes are immutable and thread-safe.

    """

    __slots__ = (
        "_source",
        "_source_file",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: Markdown source text
            source_file: Optional source file path recorded on every location

        """
        self._source = source
        self._source_file = source_file

    def parse(self) -> list[Table]:
        """Find every table in the source, in document order."""
        lines = self._split_lines()
        tables: list[Table] = []
        fence: str | None = None
        fence_depth = 0

        index = 0
        while index < len(lines):
            line = lines[index]

            if fence is not None:
                if line.quote_depth < fence_depth or (
                    line.quote_depth == fence_depth and self._closes_fence(line, fence)
                ):
                    fence = None
                index += 1
                continue

            opener = self._fence_opener(line)
            if opener is not None:
                fence = opener
                fence_depth = line.quote_depth
                index += 1
                continue

            result = self._try_parse_table(lines, index)
            if result is None:
                index += 1
                continue

            table, index = result
            logger.debug(
                "Found table at %s with %d rows", table.location, len(table.rows)
            )
            tables.append(table)

        return tables

    def document_location(self) -> SourceLocation:
        """Location spanning the whole source buffer."""
        return SourceLocation(
            lineno=1,
            col_offset=1,
            offset=0,
            end_offset=len(self._source),
            source_file=self._source_file,
        )
