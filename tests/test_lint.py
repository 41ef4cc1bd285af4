"""End-to-end tests for the table-width rule: diagnostics and fixes."""

import logging

import pytest

from pipetable.config import FormatConfig, config_context
from pipetable.errors import PatchConflictError
from pipetable.lint import (
    RULE_NAME,
    apply_patches,
    check_source,
    collect_patches,
    fix_source,
    format_table_text,
)
from pipetable.location import SourceRange
from pipetable.patches import Patch

from .conftest import md

# =========================================================================
# Canonical output
# =========================================================================


class TestScenarios:
    """Literal input and expected canonical output."""

    def test_alignment_markers(self) -> None:
        source = md("| A | B | C |", "| :- | :-: | -: |", "| 1 | 22 | 333 |", "| 4444 | 5 | 6 |")
        assert fix_source(source) == md(
            "| A    |  B  |   C |",
            "| :--- | :-: | --: |",
            "| 1    | 22  | 333 |",
            "| 4444 |  5  |   6 |",
        )

    def test_block_quote(self) -> None:
        source = md(
            "> | Name | Tool |",
            "> | --- | --- |",
            "> | antfu | eslint |",
            "> | hyoban | markdown |",
        )
        assert fix_source(source) == md(
            "> | Name   | Tool     |",
            "> | ------ | -------- |",
            "> | antfu  | eslint   |",
            "> | hyoban | markdown |",
        )

    def test_ragged_row(self) -> None:
        source = md("| A | B | C |", "| --- | --- | --- |", "| 1 | 2 |")
        assert fix_source(source).splitlines()[-1] == "| 1   | 2   |     |"

    def test_canonical_table_has_no_diagnostics(self) -> None:
        source = md(
            "| A    |  B  |   C |",
            "| :--- | :-: | --: |",
            "| 1    | 22  | 333 |",
            "| 4444 |  5  |   6 |",
        )
        assert check_source(source) == []
        assert fix_source(source) is source

    def test_wide_characters(self) -> None:
        source = md("| Text | Lang |", "| --- | :-: |", "| 你好世界 | zh |", "| Hi | en |")
        assert fix_source(source) == md(
            "| Text     | Lang |",
            "| -------- | :--: |",
            "| 你好世界 |  zh  |",
            "| Hi       |  en  |",
        )

    def test_headerless_pipes(self) -> None:
        source = md(
            "Pilot|Airport|Hours",
            "--|:--:|--:",
            "John Doe|SKG|1338",
            "Jane Roe|JFK|314",
        )
        assert fix_source(source) == md(
            "| Pilot    | Airport | Hours |",
            "| -------- | :-----: | ----: |",
            "| John Doe |   SKG   |  1338 |",
            "| Jane Roe |   JFK   |   314 |",
        )

    def test_surrounding_text_untouched(self) -> None:
        source = md("# Title", "", "| a |", "|-|", "", "```", "| x |", "|-|", "```", "")
        assert fix_source(source) == md(
            "# Title", "", "| a   |", "| --- |", "", "```", "| x |", "|-|", "```", ""
        )

    def test_multiple_tables_fixed_independently(self) -> None:
        source = md("| a |", "|-|", "", "> | bb | c |", "> |-|-|")
        assert fix_source(source) == md(
            "| a   |", "| --- |", "", "> | bb  | c   |", "> | --- | --- |"
        )

    def test_crlf_preserved(self) -> None:
        source = md("| a | b |", "|-|-|", "| 1 | 2 |", "", ending="\r\n")
        assert fix_source(source) == md(
            "| a   | b   |", "| --- | --- |", "| 1   | 2   |", "", ending="\r\n"
        )

    def test_idempotent(self) -> None:
        source = md("| A | B | C |", "| :- | :-: |", "| 1 | 2 |", "| 4444 | 5 | 6 | ")
        once = fix_source(source)
        assert fix_source(once) == once
        assert check_source(once) == []

    def test_format_table_text(self) -> None:
        assert format_table_text("|a|b|\n|-|:-:|") == "| a   |  b  |\n| --- | :-: |"


# =========================================================================
# Diagnostics
# =========================================================================


class TestDiagnostics:
    """One diagnostic per patch, pointing at the exact span."""

    def test_positions(self) -> None:
        diagnostics = check_source("| a |\n|-|")
        assert [(d.start.lineno, d.start.col_offset) for d in diagnostics] == [(1, 2), (2, 2)]
        assert [(d.end.lineno, d.end.col_offset) for d in diagnostics] == [(1, 6), (2, 4)]

    def test_rule_and_message(self) -> None:
        (diagnostic,) = check_source("| a |\n| --- |")
        assert diagnostic.rule == RULE_NAME
        assert diagnostic.message == "Format this markdown table"
        assert str(diagnostic) == "1:2: Format this markdown table [markdown-consistent-table-width]"

    def test_source_file_in_output(self) -> None:
        (diagnostic,) = check_source("| a |\n| --- |", source_file="docs/x.md")
        assert str(diagnostic).startswith("docs/x.md:1:2: ")

    def test_patch_attached(self) -> None:
        (diagnostic,) = check_source("| a |\n| --- |")
        assert diagnostic.patch.replacement == "| a   |"
        assert diagnostic.start.offset == diagnostic.patch.report_range.start

    def test_custom_message(self) -> None:
        (diagnostic,) = check_source("| a |\n| --- |", config=FormatConfig(message="Align it"))
        assert diagnostic.message == "Align it"

    def test_config_argument_does_not_leak(self) -> None:
        check_source("| a |\n| --- |", config=FormatConfig(min_column_width=7))
        assert fix_source("| a |\n| --- |") == "| a   |\n| --- |"

    def test_active_config_used(self) -> None:
        with config_context(FormatConfig(min_column_width=4)):
            assert fix_source("| a |\n| --- |") == "| a    |\n| ---- |"

    def test_no_tables(self) -> None:
        assert check_source("# Just a heading\n\nText | with a pipe\n") == []

    def test_debug_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        log = logging.getLogger("pipetable.test_lint")
        with caplog.at_level(logging.DEBUG, logger="pipetable.test_lint"):
            check_source("| a |\n|-|", logger=log)
        assert "needs 2 edit(s)" in caplog.text


# =========================================================================
# Batch application
# =========================================================================


class TestApplyPatches:
    """Patches apply as one batch against the original snapshot."""

    def test_order_independent(self) -> None:
        source = "| a |\n|-|"
        patches = collect_patches(source)
        assert apply_patches(source, reversed(patches)) == apply_patches(source, patches)

    def test_empty_batch(self) -> None:
        assert apply_patches("abc", []) == "abc"

    def test_insertions_and_replacements(self) -> None:
        patches = [
            Patch(SourceRange(1, 2), "X", SourceRange(1, 2)),
            Patch(SourceRange(3, 3), "!", SourceRange(2, 3)),
        ]
        assert apply_patches("abc", patches) == "aXc!"

    def test_adjacent_edits_allowed(self) -> None:
        patches = [
            Patch(SourceRange(0, 1), "A", SourceRange(0, 1)),
            Patch(SourceRange(1, 2), "B", SourceRange(1, 2)),
        ]
        assert apply_patches("ab", patches) == "AB"

    def test_overlap_raises(self) -> None:
        first = Patch(SourceRange(0, 3), "x", SourceRange(0, 3))
        second = Patch(SourceRange(2, 4), "y", SourceRange(2, 4))
        with pytest.raises(PatchConflictError) as exc_info:
            apply_patches("abcdef", [second, first])
        assert exc_info.value.first == first
        assert exc_info.value.second == second

    def test_two_insertions_at_same_offset_conflict(self) -> None:
        patches = [
            Patch(SourceRange(1, 1), "x", SourceRange(0, 1)),
            Patch(SourceRange(1, 1), "y", SourceRange(0, 1)),
        ]
        with pytest.raises(PatchConflictError):
            apply_patches("ab", patches)
