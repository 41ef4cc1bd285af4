"""ContextVar-based formatting configuration for pipetable.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per run, read by the layout builder and the rule layer.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed.

Usage:
    from pipetable.config import FormatConfig, config_context

    with config_context(FormatConfig(min_column_width=5)):
        diagnostics = check_source(text)

    # Or read project settings from pyproject.toml
    config = load_config(Path("pyproject.toml"))

"""

import tomllib
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pipetable.errors import ConfigError
from pipetable.utils.logger import get_logger

logger = get_logger(__name__)

# GFM needs at least three characters for a delimiter cell (---, :-:).
GFM_MIN_COLUMN_WIDTH = 3

DEFAULT_MESSAGE = "Format this markdown table"


@dataclass(frozen=True, slots=True)
class FormatConfig:
    """Immutable formatting configuration.

    Attributes:
        min_column_width: Narrowest column the layout may produce (>= 3)
        message: Diagnostic message reported for every patch
        extensions: File suffixes the CLI picks up when walking directories

    """

    min_column_width: int = GFM_MIN_COLUMN_WIDTH
    message: str = DEFAULT_MESSAGE
    extensions: tuple[str, ...] = (".md", ".markdown")

    def __post_init__(self) -> None:
        if not isinstance(self.min_column_width, int) or isinstance(
            self.min_column_width, bool
        ):
            raise ConfigError("min_column_width", "must be an integer")
        if self.min_column_width < GFM_MIN_COLUMN_WIDTH:
            raise ConfigError(
                "min_column_width",
                f"must be at least {GFM_MIN_COLUMN_WIDTH}, got {self.min_column_width}",
            )
        if not self.message:
            raise ConfigError("message", "must not be empty")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FormatConfig":
        """Create FormatConfig from dictionary.

        Keys may use dashes or underscores (``min-column-width`` as written
        in TOML, or ``min_column_width``). Unknown keys are ignored.

        Example:
            >>> FormatConfig.from_dict({"min-column-width": 4, "other": 1}).min_column_width
            4

        """
        valid_fields = {f.name for f in fields(cls)}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = key.replace("-", "_")
            if name not in valid_fields:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            if name == "extensions":
                if isinstance(value, str):
                    value = (value,)
                value = tuple(value)
            filtered[name] = value
        return cls(**filtered)


def load_config(path: Path) -> FormatConfig:
    """Load ``[tool.pipetable]`` from a pyproject.toml file.

    A missing file or a file without the table yields the defaults.

    Raises:
        ConfigError: The file is not valid TOML or a value is invalid
    """
    if not path.is_file():
        return FormatConfig()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), f"invalid TOML: {e}") from e
    section = data.get("tool", {}).get("pipetable", {})
    if not isinstance(section, dict):
        raise ConfigError("tool.pipetable", "must be a table")
    return FormatConfig.from_dict(section)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: FormatConfig = FormatConfig()

_format_config: ContextVar[FormatConfig] = ContextVar(
    "format_config",
    default=_DEFAULT_CONFIG,
)


def get_config() -> FormatConfig:
    """Get current formatting configuration (thread-local)."""
    return _format_config.get()


def set_config(config: FormatConfig) -> None:
    """Set formatting configuration for current context."""
    _format_config.set(config)


def reset_config() -> None:
    """Reset to default configuration."""
    _format_config.set(_DEFAULT_CONFIG)


@contextmanager
def config_context(config: FormatConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with config_context(FormatConfig(min_column_width=4)):
        ...     get_config().min_column_width
        4

    """
    previous = _format_config.get()
    _format_config.set(config)
    try:
        yield
    finally:
        _format_config.set(previous)


__all__ = [
    "DEFAULT_MESSAGE",
    "GFM_MIN_COLUMN_WIDTH",
    "FormatConfig",
    "config_context",
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
]
