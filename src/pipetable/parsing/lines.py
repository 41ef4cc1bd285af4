"""Line splitting and container-prefix analysis.

Splits the source buffer into lines with exact offsets (``\\n`` and
``\\r\\n`` both supported) and records, for each line, the container prefix
a table row may sit behind: indentation and block-quote markers.
"""

from __future__ import annotations

from dataclasses import dataclass

from pipetable.parsing.charsets import BLOCK_QUOTE_MARKER, FENCE_CHARS, LINE_PADDING


@dataclass(frozen=True, slots=True)
class Line:
    """One physical source line.

    Attributes:
        lineno: 1-indexed line number
        start: Offset of the first character of the line
        end: Offset of the line break (or end of buffer)
        content_start: Offset just past the container prefix
        quote_depth: Number of block-quote markers in the prefix
        indent: Columns of indentation after the last quote marker

    """

    lineno: int
    start: int
    end: int
    content_start: int
    quote_depth: int
    indent: int

    def content(self, source: str) -> str:
        """Line text after the container prefix, trailing whitespace removed."""
        return source[self.content_start : self.end].rstrip(LINE_PADDING)

    def content_end(self, source: str) -> int:
        return self.content_start + len(self.content(source))

    def is_blank(self, source: str) -> bool:
        return not self.content(source)


def analyze_prefix(text: str) -> tuple[int, int, int]:
    """Measure the container prefix of one line of text.

    Returns:
        ``(prefix_length, quote_depth, indent)`` where ``indent`` counts the
        whitespace columns after the last ``>`` (tabs count as 4)

    Example:
        >>> analyze_prefix("> > | a |")
        (4, 2, 0)
    """
    pos = 0
    depth = 0
    length = len(text)
    while True:
        scan = pos
        spaces = 0
        while scan < length and text[scan] == " " and spaces < 3:
            scan += 1
            spaces += 1
        if scan < length and text[scan] in BLOCK_QUOTE_MARKER:
            depth += 1
            pos = scan + 1
            if pos < length and text[pos] == " ":
                pos += 1
            continue
        break

    indent = 0
    while pos < length and text[pos] in LINE_PADDING:
        indent += 4 if text[pos] == "\t" else 1
        pos += 1
    return pos, depth, indent


class LineScanningMixin:
    """Mixin splitting the source into Line records.

    Required Host Attributes:
        - _source: str

    """

    _source: str

    def _split_lines(self) -> list[Line]:
        source = self._source
        lines: list[Line] = []
        start = 0
        lineno = 1
        length = len(source)
        while start < length or (start == length and not lines):
            newline = source.find("\n", start)
            if newline == -1:
                end = length
                next_start = length + 1
            else:
                end = newline - 1 if newline > start and source[newline - 1] == "\r" else newline
                next_start = newline + 1
            prefix_length, depth, indent = analyze_prefix(source[start:end])
            lines.append(
                Line(
                    lineno=lineno,
                    start=start,
                    end=end,
                    content_start=start + prefix_length,
                    quote_depth=depth,
                    indent=indent,
                )
            )
            start = next_start
            lineno += 1
        return lines

    def _fence_opener(self, line: Line) -> str | None:
        """Return the opening fence run (three or more backticks or tildes), if any."""
        content = self._source[line.content_start : line.end]
        if line.indent > 3 or not content or content[0] not in FENCE_CHARS:
            return None
        char = content[0]
        run = len(content) - len(content.lstrip(char))
        if run < 3:
            return None
        if char == "`" and "`" in content[run:]:
            return None
        return char * run

    def _closes_fence(self, line: Line, fence: str) -> bool:
        content = self._source[line.content_start : line.end].rstrip(LINE_PADDING)
        if line.indent > 3 or not content.startswith(fence):
            return False
        return not content.lstrip(fence[0])
