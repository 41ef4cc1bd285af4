"""Parsing subsystem for pipetable.

Provides mixin classes for modular parsing functionality:
- `LineScanningMixin`: Line splitting, container prefixes, fenced code
- `TableParsingMixin`: GFM pipe table recognition with offsets
- `InlineParsingMixin`: Cell content tokenization

Example:
    >>> from pipetable.parsing import parse
    >>> doc = parse("| a | b |\\n| - | - |\\n| 1 | 2 |")
    >>> [len(row.cells) for row in doc.children[0].rows]
    [2, 2]

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pipetable.parsing.inline import InlineParsingMixin
from pipetable.parsing.lines import Line, LineScanningMixin
from pipetable.parsing.table import TableParsingMixin

if TYPE_CHECKING:
    from pipetable.nodes import Document


def parse(source: str, *, source_file: str | None = None) -> Document:
    """Parse Markdown source into a Document holding its tables.

    Args:
        source: Markdown source text
        source_file: Optional source file path for locations

    Returns:
        Document whose children are the tables in document order
    """
    from pipetable.nodes import Document
    from pipetable.parser import Parser

    parser = Parser(source, source_file=source_file)
    tables = parser.parse()
    return Document(location=parser.document_location(), children=tuple(tables))


__all__ = [
    "InlineParsingMixin",
    "Line",
    "LineScanningMixin",
    "TableParsingMixin",
    "parse",
]
