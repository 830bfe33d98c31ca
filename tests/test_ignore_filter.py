"""Tests for the gitignore-style matcher and the ignore filter."""

from __future__ import annotations

import os
import stat
import warnings
from pathlib import Path

import pytest

from sourcegather.errors import ConfigError, IgnoreFileError
from sourcegather.file_resolver import IgnoreFilter, IgnoreRules, ResolverConfig
from sourcegather.file_resolver.gitignore import (
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
)


def test_rules_skip_blank_and_comment_lines():
    rules = IgnoreRules(["", "   ", "# comment", "*.min.js"])
    assert len(rules) == 1
    assert rules.rules[0].source == "*.min.js"


def test_rules_star_stays_within_segment():
    rules = IgnoreRules(["lib/*.js"])
    assert rules.match("lib/a.js")
    assert not rules.match("lib/sub/a.js")


def test_rules_double_star_crosses_segments():
    rules = IgnoreRules(["lib/**/*.js"])
    assert rules.match("lib/a.js")
    assert rules.match("lib/sub/deep/a.js")
    assert not rules.match("src/a.js")


def test_rules_unanchored_matches_any_depth():
    rules = IgnoreRules(["generated.js"])
    assert rules.match("generated.js")
    assert rules.match("a/b/generated.js")


def test_rules_leading_slash_anchors_to_root():
    rules = IgnoreRules(["/build.js"])
    assert rules.match("build.js")
    assert not rules.match("sub/build.js")


def test_rules_trailing_slash_matches_directories_only():
    rules = IgnoreRules(["vendor/"])
    assert rules.match("vendor/lib.js")
    assert rules.match("a/vendor/lib.js")
    assert rules.match("vendor", is_dir=True)
    assert not rules.match("vendor")


def test_rules_negation_reincludes_narrower_path():
    rules = IgnoreRules(["*.js", "!keep.js"])
    assert rules.match("drop.js")
    assert not rules.match("keep.js")


def test_rules_later_rule_wins():
    rules = IgnoreRules(["!keep.js", "*.js"])
    assert rules.match("keep.js")


def test_rules_excluded_directory_is_terminal():
    rules = IgnoreRules(["build/", "!build/keep.js"])
    assert rules.match("build/keep.js")


def test_rules_directory_contents_can_be_reincluded():
    rules = IgnoreRules(["build/*", "!build/keep.js"])
    assert not rules.match("build/keep.js")
    assert rules.match("build/other.js")


def test_rules_reincluded_directory_allows_negation():
    rules = IgnoreRules(["build/", "!build/", "build/*.js", "!build/keep.js"])
    assert not rules.match("build/keep.js")
    assert rules.match("build/drop.js")


def test_rules_double_star_suffix_does_not_exclude_directory_itself():
    rules = IgnoreRules(["lib/**", "!lib/keep.js"])
    assert not rules.match("lib/keep.js")
    assert rules.match("lib/other.js")


def test_rules_any_directory_pattern():
    rules = IgnoreRules(["*/"])
    assert rules.match("sub", is_dir=True)
    assert rules.match("sub/a.js")
    assert not rules.match("a.js")


def test_rules_compile_without_deprecation_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        rules = IgnoreRules(["*.js", "build/", "!build/keep.js", "lib/**", "**/"])
    assert len(rules) == 5


def test_rules_empty_match_nothing():
    rules = IgnoreRules()
    assert not rules
    assert not rules.match("anything.js")


def test_read_ignore_file_missing(tmp_path: Path):
    assert _read_ignore_file(tmp_path / "nonexistent") is None


def test_read_ignore_file_non_utf8(tmp_path: Path):
    ignore_file = tmp_path / ".sourcegatherignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    with pytest.raises(IgnoreFileError):
        _read_ignore_file(ignore_file)


def test_read_ignore_file_directory(tmp_path: Path):
    ignore_dir = tmp_path / ".sourcegatherignore"
    ignore_dir.mkdir()
    with pytest.raises(IgnoreFileError):
        _read_ignore_file(ignore_dir)


@pytest.mark.skipif(os.name != "posix" or os.getuid() == 0, reason="needs non-root POSIX")
def test_read_ignore_file_unreadable(tmp_path: Path):
    ignore_file = tmp_path / ".sourcegatherignore"
    ignore_file.write_text("*.log\n")
    ignore_file.chmod(0o000)
    try:
        with pytest.raises(IgnoreFileError):
            _read_ignore_file(ignore_file)
    finally:
        ignore_file.chmod(stat.S_IRUSR | stat.S_IWUSR)


def test_ignore_file_error_is_config_error(tmp_path: Path):
    ignore_file = tmp_path / ".sourcegatherignore"
    ignore_file.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(ConfigError):
        IgnoreFilter.from_config(ResolverConfig(cwd=tmp_path))


def test_filter_without_ignore_file_excludes_nothing(tmp_path: Path):
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=tmp_path))
    assert not ignore_filter.rules
    assert not ignore_filter.is_excluded(tmp_path / "foo.js")


def test_filter_reads_default_ignore_file(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".sourcegatherignore").write_text("# generated code\nignored.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root))
    assert ignore_filter.is_excluded(root / "ignored.js")
    assert not ignore_filter.is_excluded(root / "foo.js")


def test_filter_relative_paths_resolve_against_root(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".sourcegatherignore").write_text("ignored.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root))
    assert ignore_filter.is_excluded("ignored.js")


def test_filter_custom_ignore_path(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".sourcegatherignore").write_text("foo.js\n")
    (root / "custom-ignore").write_text("bar.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root, ignore_path="custom-ignore"))
    assert ignore_filter.is_excluded(root / "bar.js")
    assert not ignore_filter.is_excluded(root / "foo.js")


def test_filter_inline_patterns_follow_file_rules(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".sourcegatherignore").write_text("*.js\n")
    config = ResolverConfig(cwd=root, ignore_pattern=["!keep.js"])
    ignore_filter = IgnoreFilter.from_config(config)
    assert not ignore_filter.is_excluded(root / "keep.js")
    assert ignore_filter.is_excluded(root / "drop.js")


def test_filter_disabled(tmp_path: Path):
    root = tmp_path.resolve()
    (root / ".sourcegatherignore").write_text("*.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root, ignore=False))
    assert not ignore_filter.is_excluded(root / "foo.js")


def test_filter_disabled_skips_unreadable_file(tmp_path: Path):
    (tmp_path / ".sourcegatherignore").write_bytes(b"\xff\xfe\xfa")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=tmp_path, ignore=False))
    assert not ignore_filter.is_excluded(tmp_path / "foo.js")


def test_filter_never_excludes_paths_outside_root(tmp_path: Path):
    root = (tmp_path / "project").resolve()
    root.mkdir()
    (root / ".sourcegatherignore").write_text("*.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root))
    assert not ignore_filter.is_excluded(tmp_path.resolve() / "outside.js")


def test_filter_directory_rule_against_real_directory(tmp_path: Path):
    root = tmp_path.resolve()
    (root / "build").mkdir()
    (root / "build" / "out.js").write_text("")
    (root / ".sourcegatherignore").write_text("build/\n!build/out.js\n")
    ignore_filter = IgnoreFilter.from_config(ResolverConfig(cwd=root))
    assert ignore_filter.is_excluded(root / "build")
    assert ignore_filter.is_excluded(root / "build" / "out.js")
