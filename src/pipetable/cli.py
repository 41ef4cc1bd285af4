"""Command-line interface: check or fix pipe tables in Markdown files.

Usage:
    pipetable README.md docs/          # report, exit 1 if anything to fix
    pipetable --fix docs/              # rewrite files in place
    pipetable --format json README.md  # machine-readable diagnostics

Exit status:
    0  clean (or everything fixed)
    1  diagnostics found in check mode
    2  usage, configuration or I/O error

"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path

from pipetable import __version__
from pipetable.config import FormatConfig, load_config
from pipetable.errors import PipetableError
from pipetable.lint import Diagnostic, apply_patches, check_source
from pipetable.serialization import to_json
from pipetable.utils.logger import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipetable",
        description="Align GFM pipe tables in Markdown files",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories to process")
    parser.add_argument("--fix", action="store_true", help="Rewrite files in place")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Diagnostic output format (default: text)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="pyproject.toml holding [tool.pipetable] (default: ./pyproject.toml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def iter_markdown_files(paths: Sequence[Path], extensions: Sequence[str]) -> Iterator[Path]:
    """Yield every file named on the command line and matching files under directories."""
    suffixes = {ext.lower() for ext in extensions}
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix.lower() in suffixes:
                    yield child
        else:
            yield path


def read_text(path: Path) -> str:
    """Read a file without newline translation so ``\\r\\n`` survives."""
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def process_file(path: Path, config: FormatConfig, *, fix: bool) -> list[Diagnostic]:
    """Check (and optionally fix) one file.

    Returns:
        Diagnostics found before any fix was applied
    """
    source = read_text(path)
    diagnostics = check_source(source, source_file=str(path), config=config)
    if fix and diagnostics:
        write_text(path, apply_patches(source, [d.patch for d in diagnostics]))
        logger.info("Fixed %d issue(s) in %s", len(diagnostics), path)
    return diagnostics


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        config = load_config(args.config or Path("pyproject.toml"))
    except PipetableError as e:
        print(f"pipetable: {e}", file=sys.stderr)
        return EXIT_ERROR

    found: list[Diagnostic] = []
    status = EXIT_OK
    for path in iter_markdown_files(args.paths, config.extensions):
        try:
            found.extend(process_file(path, config, fix=args.fix))
        except (OSError, UnicodeDecodeError, PipetableError) as e:
            print(f"pipetable: {path}: {e}", file=sys.stderr)
            status = EXIT_ERROR

    if args.format == "json":
        print(to_json(found, indent=2))
    elif not args.fix:
        for diagnostic in found:
            print(diagnostic)

    if status == EXIT_OK and found and not args.fix:
        status = EXIT_DIAGNOSTICS
    return status


if __name__ == "__main__":
    sys.exit(main())
