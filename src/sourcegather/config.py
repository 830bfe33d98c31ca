"""
TOML-based config file loading for sourcegather.

Searches for `.sourcegather.toml`, `sourcegather.toml`, or `pyproject.toml
[tool.sourcegather]` walking up from the resolution root. Config values are merged
with CLI flags using three-way precedence: explicit CLI flags > config file >
built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar

from sourcegather.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class SourceGatherConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    extensions: list[str] | None = None
    ignore: bool | None = None
    ignore_path: str | None = None
    ignore_pattern: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".sourcegather.toml", "sourcegather.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "ignore-path": "ignore_path",
    "ignore-pattern": "ignore_pattern",
}

_VALID_FIELDS = {f.name for f in fields(SourceGatherConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.sourcegather.toml` >
    `sourcegather.toml` > `pyproject.toml` (only if it has `[tool.sourcegather]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.sourcegather] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "sourcegather" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> SourceGatherConfig:
    """
    Load a `SourceGatherConfig` from a TOML file. Supports both standalone
    `sourcegather.toml` / `.sourcegather.toml` and `pyproject.toml` (extracts
    `[tool.sourcegather]`). TOML kebab-case keys are mapped to Python snake_case.

    Raises `ConfigError` if the file can't be read or isn't valid TOML.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("sourcegather", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> SourceGatherConfig:
    """Parse a TOML dict into SourceGatherConfig, ignoring unknown keys."""
    mapped: dict[str, Any] = {}
    for key, value in data.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    # A single string is accepted where a list is expected
    for list_field in ("extensions", "ignore_pattern"):
        if isinstance(mapped.get(list_field), str):
            mapped[list_field] = [mapped[list_field]]

    return SourceGatherConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: SourceGatherConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(SourceGatherConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
