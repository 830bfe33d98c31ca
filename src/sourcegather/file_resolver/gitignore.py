"""
Ignore-file handling using pathspec.

`IgnoreRules` is an ordered gitignore matcher: later rules override earlier ones,
`!` re-includes, and an excluded directory is terminal (nothing below it can be
re-included unless the directory itself is re-included first). `pathspec`
compiles each individual rule; evaluation order and the directory handling
live here because `PathSpec.match_file()` alone lets a deeper negation
re-include a file under an excluded directory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pathspec

from sourcegather.errors import ConfigError, IgnoreFileError
from sourcegather.file_resolver.defaults import DEFAULT_TOOL_NAME, default_ignore_filename
from sourcegather.file_resolver.types import ResolverConfig

if TYPE_CHECKING:
    from sourcegather.file_resolver.resolver import Candidate

logger = logging.getLogger(__name__)


def _read_ignore_file(path: Path) -> list[str] | None:
    """
    Return the rule lines of an ignore file, or `None` if it doesn't exist.
    Blank lines and `#` comments are dropped.

    Raises `IgnoreFileError` if the file exists but can't be read or isn't UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as e:
        raise IgnoreFileError(path, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise IgnoreFileError(path, e.strerror or str(e)) from e
    return [
        line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")
    ]


@dataclass(frozen=True)
class IgnoreRule:
    """One compiled gitignore line."""

    source: str
    pattern: pathspec.Pattern
    negated: bool
    dir_only: bool

    @classmethod
    def parse(cls, line: str) -> IgnoreRule | None:
        """Compile a single line, or return `None` for lines that hold no rule."""
        try:
            spec = pathspec.PathSpec.from_lines("gitignore", [line])
        except ValueError as e:
            raise ConfigError(f"Invalid ignore pattern {line!r}: {e}") from e
        patterns = [p for p in spec.patterns if p.include is not None]
        if not patterns:
            return None
        pattern = patterns[0]
        body = line.strip()
        return cls(
            source=line,
            pattern=pattern,
            negated=pattern.include is False,
            dir_only=body.endswith("/") and not body.endswith("\\/"),
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        # Dir-only rules are compiled to match `name/`, so directories get a
        # trailing slash for them. Other rules see the bare path, which keeps
        # `a/**` from matching the directory `a` itself.
        candidate = rel_path + "/" if is_dir and self.dir_only else rel_path
        return self.pattern.match_file(candidate) is not None


class IgnoreRules:
    """
    Ordered gitignore rule set. Paths are POSIX-style and relative to the
    directory the rules were written for.
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        rules: list[IgnoreRule] = []
        for line in lines:
            rule = IgnoreRule.parse(line)
            if rule is not None:
                rules.append(rule)
        self._rules: tuple[IgnoreRule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[IgnoreRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def match(self, rel_path: str, is_dir: bool = False) -> bool:
        """True if `rel_path` is ignored, taking excluded parent directories into account."""
        rel_path = rel_path.strip("/")
        if not rel_path or not self._rules:
            return False
        parts = rel_path.split("/")
        for depth in range(1, len(parts)):
            if self._evaluate("/".join(parts[:depth]), is_dir=True):
                return True
        return self._evaluate(rel_path, is_dir)

    def _evaluate(self, rel_path: str, is_dir: bool) -> bool:
        """Last matching rule wins; no match means included."""
        excluded = False
        for rule in self._rules:
            if rule.matches(rel_path, is_dir):
                excluded = not rule.negated
        return excluded


class IgnoreFilter:
    """
    Decides whether a candidate path is excluded. Rules are matched against the
    path relative to `root`; paths outside `root` are never excluded.
    Immutable once constructed.
    """

    def __init__(self, root: Path, rules: IgnoreRules | None = None) -> None:
        self._root: Path = root
        self._rules: IgnoreRules = rules if rules is not None else IgnoreRules()

    @classmethod
    def load(
        cls,
        root: Path,
        ignore_path: Path | None = None,
        patterns: Iterable[str] = (),
        tool_name: str = DEFAULT_TOOL_NAME,
    ) -> IgnoreFilter:
        """
        Read `ignore_path` (default `.{tool_name}ignore` in `root`) if present and
        append the inline `patterns` after its rules.
        """
        path = ignore_path if ignore_path is not None else root / default_ignore_filename(tool_name)
        lines = _read_ignore_file(path)
        if lines is None:
            logger.debug("No ignore file at %s", path)
            lines = []
        else:
            logger.debug("Loaded %d ignore rules from %s", len(lines), path)
        return cls(root, IgnoreRules([*lines, *patterns]))

    @classmethod
    def from_config(cls, config: ResolverConfig) -> IgnoreFilter:
        """Build the filter for a run; a disabled filter excludes nothing."""
        root = config.root
        if not config.ignore:
            return cls(root)
        return cls.load(
            root,
            ignore_path=config.effective_ignore_path,
            patterns=config.ignore_pattern,
            tool_name=config.tool_name,
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def rules(self) -> IgnoreRules:
        return self._rules

    def is_excluded(self, path: str | Path) -> bool:
        p = Path(path)
        if not p.is_absolute():
            p = self._root / p
        try:
            rel = p.relative_to(self._root)
        except ValueError:
            return False
        return self._rules.match(rel.as_posix(), is_dir=p.is_dir())

    def excludes(self, candidate: Candidate) -> bool:
        """
        Check a resolved candidate under both the path it was found by and its real
        path, so rules still apply to files reached through a symlinked directory.
        """
        if self.is_excluded(candidate.found):
            return True
        return candidate.path != candidate.found and self.is_excluded(candidate.path)
