"""Rule layer: turn table patches into diagnostics and apply fixes.

Every table in a document is laid out and patched independently against
one immutable snapshot of the source. The resulting patches are either
reported (one diagnostic per patch) or applied together as a single
batch.

Example:
    >>> from pipetable.lint import check_source, fix_source
    >>> source = "| a | b |\\n|-|-|\\n| 1 | 2 |\\n"
    >>> len(check_source(source)) > 0
    True
    >>> print(fix_source(source), end="")
    | a   | b   |
    | --- | --- |
    | 1   | 2   |

"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pipetable.config import FormatConfig, config_context, get_config
from pipetable.errors import PatchConflictError
from pipetable.location import LineIndex, SourceLocation, SourceRange
from pipetable.parsing import parse
from pipetable.patches import Patch, generate_patches
from pipetable.utils.logger import get_logger

RULE_NAME = "markdown-consistent-table-width"

_logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reportable formatting problem with its fix.

    Attributes:
        rule: Rule identifier
        message: Human-facing message
        start: Location of the first reported character
        end: Location just past the last reported character
        patch: Edit that resolves the problem

    """

    rule: str
    message: str
    start: SourceLocation
    end: SourceLocation
    patch: Patch

    def __str__(self) -> str:
        return f"{self.start}: {self.message} [{self.rule}]"


def collect_patches(
    source: str,
    *,
    source_file: str | None = None,
    logger: logging.Logger | None = None,
) -> list[Patch]:
    """Patches for every table in ``source``, in source order."""
    log = logger or _logger
    doc = parse(source, source_file=source_file)
    patches: list[Patch] = []
    for table in doc.children:
        table_patches = generate_patches(table, source, logger=log)
        if table_patches:
            log.debug(
                "Table at %s needs %d edit(s)", table.location, len(table_patches)
            )
        patches.extend(table_patches)
    return patches


def check_source(
    source: str,
    *,
    source_file: str | None = None,
    config: FormatConfig | None = None,
    logger: logging.Logger | None = None,
) -> list[Diagnostic]:
    """Report every table in ``source`` that is not in canonical form.

    Args:
        source: Markdown source text
        source_file: Optional path shown in diagnostic locations
        config: Overrides the active configuration for this call
        logger: Receives debug records (defaults to ``pipetable.lint``)

    Returns:
        One Diagnostic per patch, in source order
    """
    with config_context(config or get_config()):
        active = get_config()
        patches = collect_patches(source, source_file=source_file, logger=logger)

    index = LineIndex(source)
    diagnostics: list[Diagnostic] = []
    for patch in patches:
        report = patch.report_range
        start = index.location(SourceRange(report.start, report.start), source_file=source_file)
        end = index.location(SourceRange(report.end, report.end), source_file=source_file)
        diagnostics.append(
            Diagnostic(
                rule=RULE_NAME,
                message=active.message,
                start=start,
                end=end,
                patch=patch,
            )
        )
    return diagnostics


def apply_patches(source: str, patches: Iterable[Patch]) -> str:
    """Apply patches computed against ``source`` as one atomic batch.

    Raises:
        PatchConflictError: Two patches edit overlapping ranges
    """
    ordered = sorted(patches, key=lambda p: (p.edit_range.start, p.edit_range.end))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.edit_range.overlaps(current.edit_range):
            raise PatchConflictError(previous, current)

    parts: list[str] = []
    cursor = 0
    for patch in ordered:
        parts.append(source[cursor : patch.edit_range.start])
        parts.append(patch.replacement)
        cursor = patch.edit_range.end
    parts.append(source[cursor:])
    return "".join(parts)


def fix_source(
    source: str,
    *,
    source_file: str | None = None,
    config: FormatConfig | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Return ``source`` with every table rewritten to canonical form."""
    with config_context(config or get_config()):
        patches = collect_patches(source, source_file=source_file, logger=logger)
    if not patches:
        return source
    return apply_patches(source, patches)


def format_table_text(text: str, *, config: FormatConfig | None = None) -> str:
    """Reformat a snippet holding one or more tables.

    Example:
        >>> format_table_text("|a|b|\\n|-|:-:|")
        '| a   |  b  |\\n| --- | :-: |'
    """
    return fix_source(text, config=config)
