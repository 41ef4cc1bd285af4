"""Shared fixtures and helpers for pipetable tests."""

from collections.abc import Iterator

import pytest

from pipetable.config import reset_config
from pipetable.nodes import Table
from pipetable.parsing import parse


def md(*lines: str, ending: str = "\n") -> str:
    """Join source lines, e.g. ``md("| a |", "| - |")``."""
    return ending.join(lines)


def only_table(source: str) -> Table:
    """Parse ``source`` and return its single table."""
    doc = parse(source)
    assert len(doc.children) == 1, f"expected one table, got {len(doc.children)}"
    return doc.children[0]


@pytest.fixture(autouse=True)
def _default_config() -> Iterator[None]:
    """Every test starts and ends with the default configuration."""
    reset_config()
    yield
    reset_config()
