"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from sourcegather.cli import Options
from sourcegather.config import (
    SourceGatherConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from sourcegather.errors import ConfigError


def test_find_config_sourcegather_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text('extensions = [".js"]\n')
    result = find_config_file(tmp_path)
    assert result == config_file.resolve()


def test_find_config_dot_file_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "sourcegather.toml").write_text('extensions = [".js"]\n')
    dot_config = tmp_path / ".sourcegather.toml"
    dot_config.write_text('extensions = [".jsx"]\n')
    result = find_config_file(tmp_path)
    assert result == dot_config.resolve()


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.sourcegather]\nextensions = [".js"]\n')
    result = find_config_file(tmp_path)
    assert result == config_file.resolve()


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    result = find_config_file(tmp_path)
    assert result is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text("ignore = false\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    result = find_config_file(subdir)
    assert result == config_file.resolve()


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_kebab_case(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text(
        'extensions = [".js", ".jsx"]\n'
        "ignore = true\n"
        'ignore-path = ".lintignore"\n'
        'ignore-pattern = ["dist/", "!dist/keep.js"]\n'
    )
    config = load_config(config_file)
    assert config.extensions == [".js", ".jsx"]
    assert config.ignore is True
    assert config.ignore_path == ".lintignore"
    assert config.ignore_pattern == ["dist/", "!dist/keep.js"]


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.sourcegather]\nignore-pattern = "vendor/"\n')
    config = load_config(config_file)
    assert config.ignore_pattern == ["vendor/"]


def test_load_config_partial(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text("ignore = false\nunknown-key = 1\n")
    config = load_config(config_file)
    assert config.ignore is False
    assert config.extensions is None
    assert config.ignore_pattern is None


def test_load_config_ignores_tables(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text('ignore = false\n\n[files]\nextensions = [".mjs"]\n')
    config = load_config(config_file)
    assert config.ignore is False
    assert config.extensions is None


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "sourcegather.toml"
    config_file.write_text("this is not valid toml [[[")
    with pytest.raises(ConfigError):
        load_config(config_file)


def _make_options(
    patterns: list[str] | None = None,
    extensions: list[str] | None = None,
    cwd: str | None = None,
    ignore: bool = True,
    ignore_path: str | None = None,
    ignore_pattern: list[str] | None = None,
) -> Options:
    """Create an Options with defaults for all required fields."""
    return Options(
        patterns=patterns if patterns is not None else ["."],
        extensions=extensions,
        cwd=cwd,
        ignore=ignore,
        ignore_path=ignore_path,
        ignore_pattern=ignore_pattern if ignore_pattern is not None else [],
        list_files=False,
        verbose=False,
        version=False,
    )


def test_merge_no_config() -> None:
    opts = _make_options(extensions=[".js"])
    result = merge_cli_with_config(opts, config=None, explicit_flags=set())
    assert result.extensions == [".js"]


def test_merge_config_overrides_defaults() -> None:
    opts = _make_options()
    config = SourceGatherConfig(extensions=[".jsx"], ignore=False)
    result = merge_cli_with_config(opts, config=config, explicit_flags=set())
    assert result.extensions == [".jsx"]
    assert result.ignore is False


def test_merge_explicit_cli_overrides_config() -> None:
    opts = _make_options(extensions=[".mjs"], ignore=False)
    config = SourceGatherConfig(extensions=[".jsx"], ignore=True, ignore_path="other")
    result = merge_cli_with_config(
        opts, config=config, explicit_flags={"extensions", "ignore"}
    )
    assert result.extensions == [".mjs"]
    assert result.ignore is False
    assert result.ignore_path == "other"
