"""Property-based tests for the formatter using Hypothesis.

These tests verify invariants that should hold for any pipe table:
1. Fixing is idempotent: a fixed table produces no further patches
2. Every column is at least three columns wide and fits its widest value
3. Every line of a fixed table has the same display width
4. Delimiter markers encode the recorded alignment exactly
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from pipetable.layout import build_layout
from pipetable.lint import check_source, fix_source
from pipetable.nodes import ALIGNMENTS
from pipetable.parsing import parse
from pipetable.render import delimiter_cell
from pipetable.width import display_width

# No pipes, backslashes, backticks or angle brackets: they change cell structure.
_ALPHABET = "abcXYZ019 .,:-_*#é你好世界한국😀"

cell_values = st.text(alphabet=_ALPHABET, max_size=8)
markers = st.sampled_from(["-", "---", ":-", ":---", "-:", "---:", ":-:", ":---:"])
paddings = st.sampled_from(["", " ", "  "])


@st.composite
def pipe_tables(draw: st.DrawFn) -> str:
    """Markdown source holding one (possibly ragged) pipe table."""
    columns = draw(st.integers(min_value=1, max_value=4))
    header = draw(st.lists(cell_values, min_size=columns, max_size=columns))
    delimiter = draw(st.lists(markers, min_size=1, max_size=columns))
    body = draw(st.lists(st.lists(cell_values, min_size=1, max_size=columns), max_size=4))
    closing = draw(st.booleans())
    pad = draw(paddings)

    def line(cells: list[str]) -> str:
        text = "|" + "|".join(f"{pad}{cell}{pad}" for cell in cells)
        return text + "|" if closing else text

    return "\n".join([line(header), line(delimiter), *(line(row) for row in body)])


class TestFormattingProperties:
    """Invariants of the formatted output."""

    @given(source=pipe_tables())
    @settings(max_examples=200)
    def test_fix_is_idempotent(self, source: str) -> None:
        """A fixed table produces no further diagnostics."""
        once = fix_source(source)
        assert check_source(once) == []
        assert fix_source(once) == once

    @given(source=pipe_tables())
    @settings(max_examples=100)
    def test_fix_keeps_one_table(self, source: str) -> None:
        before = parse(source).children
        after = parse(fix_source(source)).children
        assert len(before) == len(after) == 1
        assert len(after[0].rows) == len(before[0].rows)

    @given(source=pipe_tables())
    @settings(max_examples=100)
    def test_fixed_lines_share_display_width(self, source: str) -> None:
        lines = fix_source(source).split("\n")
        assert len({display_width(text) for text in lines}) == 1


class TestLayoutProperties:
    """Invariants of the computed layout."""

    @given(source=pipe_tables())
    @settings(max_examples=100)
    def test_width_invariant(self, source: str) -> None:
        table = parse(source).children[0]
        layout = build_layout(table, source)
        assert layout is not None
        for col, width in enumerate(layout.widths):
            assert width >= 3
            assert width >= max(display_width(values[col]) for values in layout.row_values)

    @given(source=pipe_tables())
    @settings(max_examples=100)
    def test_rows_padded_to_column_count(self, source: str) -> None:
        table = parse(source).children[0]
        layout = build_layout(table, source)
        assert layout is not None
        assert layout.column_count == table.column_count
        assert all(len(values) == layout.column_count for values in layout.row_values)


class TestDelimiterProperties:
    """Alignment fidelity of delimiter markers."""

    @given(
        width=st.integers(min_value=3, max_value=40),
        alignment=st.sampled_from(ALIGNMENTS),
    )
    def test_marker_encodes_alignment(self, width: int, alignment: str | None) -> None:
        marker = delimiter_cell(width, alignment)  # type: ignore[arg-type]
        assert len(marker) == width
        assert marker.startswith(":") == (alignment in ("left", "center"))
        assert marker.endswith(":") == (alignment in ("right", "center"))
        assert marker.strip(":") == "-" * (width - marker.count(":"))
