"""Tests for the pipetable command line."""

import json
from pathlib import Path

import pytest

from pipetable import __version__
from pipetable.cli import EXIT_DIAGNOSTICS, EXIT_ERROR, EXIT_OK, iter_markdown_files, main

_DIRTY = "# Doc\n\n| a | b |\n|-|-|\n| 1 | 2 |\n"
_CLEAN = "# Doc\n\n| a   | b   |\n| --- | --- |\n| 1   | 2   |\n"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the default ./pyproject.toml lookup inside the test directory."""
    monkeypatch.chdir(tmp_path)


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    return path


class TestCheckMode:
    """Reporting without modifying files."""

    def test_clean_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path / "clean.md", _CLEAN)
        assert main([str(path)]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_dirty_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path / "dirty.md", _DIRTY)
        assert main([str(path)]) == EXIT_DIAGNOSTICS
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == f"{path}:3:2: Format this markdown table [markdown-consistent-table-width]"
        assert path.read_text(encoding="utf-8") == _DIRTY

    def test_json_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path / "dirty.md", _DIRTY)
        assert main(["--format", "json", str(path)]) == EXIT_DIAGNOSTICS
        payload = json.loads(capsys.readouterr().out)
        assert payload
        assert {item["start"]["source_file"] for item in payload} == {str(path)}

    def test_directory_walk(self, tmp_path: Path) -> None:
        _write(tmp_path / "docs" / "a.md", _CLEAN)
        _write(tmp_path / "docs" / "nested" / "b.markdown", _DIRTY)
        _write(tmp_path / "docs" / "c.txt", _DIRTY)
        found = list(iter_markdown_files([tmp_path / "docs"], (".md", ".markdown")))
        assert [p.name for p in found] == ["a.md", "b.markdown"]
        assert main([str(tmp_path / "docs")]) == EXIT_DIAGNOSTICS


class TestFixMode:
    """--fix rewrites files in place."""

    def test_fix(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "dirty.md", _DIRTY)
        assert main(["--fix", str(path)]) == EXIT_OK
        assert path.read_text(encoding="utf-8") == _CLEAN
        assert main([str(path)]) == EXIT_OK

    def test_fix_keeps_crlf(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "dirty.md", _DIRTY.replace("\n", "\r\n"))
        assert main(["--fix", str(path)]) == EXIT_OK
        assert path.read_bytes() == _CLEAN.replace("\n", "\r\n").encode("utf-8")

    def test_fix_leaves_clean_file_alone(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "clean.md", _CLEAN)
        before = path.stat().st_mtime_ns
        assert main(["--fix", str(path)]) == EXIT_OK
        assert path.stat().st_mtime_ns == before


class TestConfiguration:
    """[tool.pipetable] settings reach the formatter."""

    def test_config_option(self, tmp_path: Path) -> None:
        config = _write(tmp_path / "cfg" / "pyproject.toml", "[tool.pipetable]\nmin-column-width = 4\n")
        path = _write(tmp_path / "t.md", "| a |\n|-|\n")
        assert main(["--fix", "--config", str(config), str(path)]) == EXIT_OK
        assert path.read_text(encoding="utf-8") == "| a    |\n| ---- |\n"

    def test_default_pyproject_in_cwd(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _write(tmp_path / "pyproject.toml", '[tool.pipetable]\nmessage = "Align table"\n')
        path = _write(tmp_path / "t.md", "| a |\n|-|\n")
        assert main([str(path)]) == EXIT_DIAGNOSTICS
        assert "Align table" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _write(tmp_path / "pyproject.toml", "[tool.pipetable]\nmin-column-width = 1\n")
        path = _write(tmp_path / "t.md", _CLEAN)
        assert main([str(path)]) == EXIT_ERROR
        assert "min_column_width" in capsys.readouterr().err


class TestErrors:
    """I/O problems map to exit status 2."""

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "missing.md")]) == EXIT_ERROR
        assert "missing.md" in capsys.readouterr().err

    def test_missing_file_does_not_stop_others(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "dirty.md", _DIRTY)
        assert main(["--fix", str(tmp_path / "missing.md"), str(path)]) == EXIT_ERROR
        assert path.read_text(encoding="utf-8") == _CLEAN

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"pipetable {__version__}"
