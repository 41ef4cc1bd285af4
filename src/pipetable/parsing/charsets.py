"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Usage:
    from pipetable.parsing.charsets import FENCE_CHARS

    if char in FENCE_CHARS:  # O(1) lookup
        ...
"""

# ASCII whitespace for basic checks
WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

# Characters stripped from the ends of a line's content (str for str.strip)
LINE_PADDING = " \t"

# Valid fence characters
FENCE_CHARS: frozenset[str] = frozenset("`~")

# Block quote marker
BLOCK_QUOTE_MARKER: frozenset[str] = frozenset(">")

# Characters allowed in a delimiter row
DELIMITER_ROW_CHARS: frozenset[str] = frozenset("|:- \t")

# Characters that start a non-text inline token inside a cell
INLINE_SPECIAL: frozenset[str] = frozenset("`<\\")
