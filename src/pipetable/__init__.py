"""
pipetable: width-aligned formatting for GFM pipe tables

Rewrites Markdown pipe tables into canonical, column-aligned form with the
smallest possible set of edits. Display width is measured per code point,
so CJK text and emoji line up in monospace editors. Tables inside block
quotes keep their ``>`` markers, and ``\\r\\n`` line endings are preserved.

Quick Start:
    >>> from pipetable import fix_source
    >>> print(fix_source("| a | bb |\\n|:-|-:|\\n| ccc | d |"))
    | a   |  bb |
    | :-- | --: |
    | ccc |   d |

    >>> # Or inspect the individual edits
    >>> from pipetable import check_source
    >>> [d.start.lineno for d in check_source("| a |\\n|-|")]
    [1, 2]

Engine API (host supplies the table nodes):
    >>> from pipetable import build_layout, generate_patches, parse
    >>> source = "| A | B |\\n| - | - |"
    >>> table = parse(source).children[0]
    >>> build_layout(table, source).widths
    (3, 3)

Installation:
    pip install pipetable            # zero runtime dependencies
"""

from pipetable.config import (
    FormatConfig,
    config_context,
    get_config,
    load_config,
    reset_config,
    set_config,
)
from pipetable.errors import ConfigError, PatchConflictError, PipetableError
from pipetable.layout import TableLayout, build_layout, cell_text, inline_literal
from pipetable.lint import (
    RULE_NAME,
    Diagnostic,
    apply_patches,
    check_source,
    collect_patches,
    fix_source,
    format_table_text,
)
from pipetable.location import LineIndex, SourceLocation, SourceRange
from pipetable.nodes import (
    Alignment,
    CodeSpan,
    Document,
    HtmlInline,
    Inline,
    Table,
    TableCell,
    TableRow,
    Text,
)
from pipetable.parser import Parser
from pipetable.parsing import parse
from pipetable.patches import Patch, generate_patches
from pipetable.render import (
    align_cell,
    delimiter_cell,
    render_delimiter,
    render_row,
    render_table,
)
from pipetable.serialization import from_dict, from_json, to_dict, to_json
from pipetable.source import detect_line_ending, line_prefix
from pipetable.width import display_width

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022: grouped by category for maintainability
    # Version
    "__version__",
    # Rule API
    "RULE_NAME",
    "Diagnostic",
    "apply_patches",
    "check_source",
    "collect_patches",
    "fix_source",
    "format_table_text",
    # Engine
    "TableLayout",
    "Patch",
    "align_cell",
    "build_layout",
    "cell_text",
    "delimiter_cell",
    "detect_line_ending",
    "display_width",
    "generate_patches",
    "inline_literal",
    "line_prefix",
    "render_delimiter",
    "render_row",
    "render_table",
    # Nodes
    "Alignment",
    "CodeSpan",
    "Document",
    "HtmlInline",
    "Inline",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    # Parser
    "Parser",
    "parse",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "FormatConfig",
    "get_config",
    "set_config",
    "reset_config",
    "config_context",
    "load_config",
    # Errors
    "PipetableError",
    "ConfigError",
    "PatchConflictError",
    # Location
    "LineIndex",
    "SourceLocation",
    "SourceRange",
]
