"""Monospace display width of Unicode text.

Every code point occupies one or two terminal columns. The wide test is
delegated to wcwidth, which tracks the East Asian Width tables (CJK, Kana,
Hangul, fullwidth forms) and the emoji presentation ranges of the current
Unicode release. Code points wcwidth reports as zero-width or
non-printable still count as one column, so cell padding never shrinks.

This is the single source of truth for padding decisions. ``len()`` counts
code points, not columns, and must never be used to pad a cell.

Example:
    >>> display_width("Hi")
    2
    >>> display_width("你好")
    4

Thread Safety:
    Pure functions. wcwidth caches its lookups internally.

"""

import wcwidth


def is_wide(char: str) -> bool:
    """Return True if the single code point ``char`` occupies two columns."""
    return wcwidth.wcwidth(char) == 2


def display_width(text: str) -> int:
    """Number of monospace columns ``text`` occupies.

    Iterates by code point (Python strings already are code point
    sequences, so astral characters count once), adding 2 for wide code
    points and 1 otherwise. Total over every string; never raises.
    """
    if text.isascii():
        return len(text)
    return sum(2 if is_wide(char) else 1 for char in text)
