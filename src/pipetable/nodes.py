"""Typed syntax tree nodes for pipe tables.

All nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: ``match`` statements work naturally

Node Hierarchy:
Node (base)
├── Document
├── Table
├── TableRow
├── TableCell
└── Inline (closed union)
    ├── Text
    ├── CodeSpan
    └── HtmlInline

Every node records where it came from in the source buffer. A node whose
location is ``SourceLocation.unknown()`` has no resolvable offsets; the
formatting engine skips the smallest unit containing it.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from typing import Literal, TypeAlias

from pipetable.location import SourceLocation

Alignment: TypeAlias = Literal["left", "center", "right"] | None

ALIGNMENTS: tuple[Alignment, ...] = (None, "left", "center", "right")


# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all nodes.

    All nodes track their source location for patching and diagnostics.

    """

    location: SourceLocation


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text run inside a cell.

    Escaped pipes (``\\|``) stay in the content verbatim.

    """

    content: str


@dataclass(frozen=True, slots=True)
class CodeSpan(Node):
    """Inline code.

    Markdown: `code`

    """

    code: str


@dataclass(frozen=True, slots=True)
class HtmlInline(Node):
    """Raw inline HTML or an autolink.

    Markdown: <br> or <https://example.com>

    """

    html: str


Inline: TypeAlias = Text | CodeSpan | HtmlInline


# =============================================================================
# Table Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """Table cell.

    Markdown: | cell content |

    The location starts at the cell's leading pipe when one is present and
    runs up to the next pipe; the last cell of a row also covers the
    closing pipe.

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    """Table row.

    Markdown: | cell1 | cell2 |

    The location covers the row's own text only: no container prefix
    (``> ``, indentation) and no trailing whitespace or line ending.

    """

    cells: tuple[TableCell, ...]
    is_header: bool = False


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Table (GFM-style).

    Markdown:
        | A | B |
        |---|---|
        | 1 | 2 |

    ``alignments`` holds the hints parsed from the delimiter row; its length
    may differ from any row's cell count.

    """

    head: tuple[TableRow, ...]  # Header rows (usually 1)
    body: tuple[TableRow, ...]  # Body rows
    alignments: tuple[Alignment, ...]

    @property
    def rows(self) -> tuple[TableRow, ...]:
        """All rows in source order, header first."""
        return self.head + self.body

    @property
    def column_count(self) -> int:
        """Declared column count: widest of the hints and every row."""
        return max(
            len(self.alignments),
            max((len(row.cells) for row in self.rows), default=0),
        )


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root node holding every table found in a source buffer."""

    children: tuple[Table, ...]
