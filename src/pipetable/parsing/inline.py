"""Inline tokenization of table cell content.

Cells only need enough inline structure for the formatter to find the
first and last meaningful character, so three node kinds are produced:
code spans, raw HTML/autolinks, and text runs. Every node carries exact
source offsets; whitespace at either end of the cell belongs to no node.
"""

from __future__ import annotations

import re

from pipetable.location import SourceLocation
from pipetable.nodes import CodeSpan, HtmlInline, Inline, Text
from pipetable.parsing.charsets import INLINE_SPECIAL, WHITESPACE

# Autolinks (<scheme:...>), open/close tags and comments.
_HTML_INLINE = re.compile(
    r"<(?:"
    r"[A-Za-z][A-Za-z0-9+.\-]{1,31}:[^\s<>]*"
    r"|/?[A-Za-z][A-Za-z0-9\-]*(?:\s[^<>]*)?/?"
    r"|!--.*?--"
    r")>"
)


class InlineParsingMixin:
    """Mixin turning a cell's raw text into inline nodes.

    Required Host Attributes:
        - _source: str
        - _source_file: str | None

    """

    _source: str
    _source_file: str | None

    def _parse_cell_inlines(
        self, start: int, end: int, lineno: int, line_start: int
    ) -> tuple[Inline, ...]:
        """Tokenize ``source[start:end]`` (one cell, pipes excluded).

        Args:
            start: Offset of the first character after the opening pipe
            end: Offset of the closing pipe (or end of row)
            lineno: Line the cell sits on
            line_start: Offset of that line, for column numbers
        """
        source = self._source
        while start < end and source[start] in WHITESPACE:
            start += 1
        while end > start and source[end - 1] in WHITESPACE:
            end -= 1
        if start == end:
            return ()

        nodes: list[Inline] = []
        text_start = start
        pos = start
        while pos < end:
            char = source[pos]
            if char not in INLINE_SPECIAL:
                pos += 1
                continue
            if char == "\\":
                pos += 2
                continue

            token_end = (
                self._code_span_end(pos, end) if char == "`" else self._html_end(pos, end)
            )
            if token_end is None:
                pos += 1
                continue

            if text_start < pos:
                nodes.append(self._text_node(text_start, pos, lineno, line_start))
            loc = self._location(pos, token_end, lineno, line_start)
            raw = source[pos:token_end]
            if char == "`":
                fence = len(raw) - len(raw.lstrip("`"))
                nodes.append(CodeSpan(location=loc, code=raw[fence:-fence]))
            else:
                nodes.append(HtmlInline(location=loc, html=raw))
            pos = token_end
            text_start = pos

        if text_start < end:
            nodes.append(self._text_node(text_start, min(pos, end), lineno, line_start))
        return tuple(nodes)

    def _code_span_end(self, pos: int, end: int) -> int | None:
        """End offset of the code span opening at ``pos``, if it is closed."""
        source = self._source
        run_end = pos
        while run_end < end and source[run_end] == "`":
            run_end += 1
        fence = source[pos:run_end]

        search = run_end
        while True:
            found = source.find(fence, search, end)
            if found == -1:
                return None
            close_end = found + len(fence)
            if close_end < end and source[close_end] == "`":
                # Longer backtick run: not a matching closer
                while close_end < end and source[close_end] == "`":
                    close_end += 1
                search = close_end
                continue
            return close_end

    def _html_end(self, pos: int, end: int) -> int | None:
        match = _HTML_INLINE.match(self._source, pos, end)
        return match.end() if match else None

    def _text_node(self, start: int, end: int, lineno: int, line_start: int) -> Text:
        return Text(
            location=self._location(start, end, lineno, line_start),
            content=self._source[start:end],
        )

    def _location(self, start: int, end: int, lineno: int, line_start: int) -> SourceLocation:
        return SourceLocation(
            lineno=lineno,
            col_offset=start - line_start + 1,
            offset=start,
            end_offset=end,
            end_lineno=lineno,
            end_col_offset=end - line_start + 1,
            source_file=self._source_file,
        )
