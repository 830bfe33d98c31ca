"""
PatternResolver: expands patterns into candidate files.

Resolves a mix of files, directories, and glob patterns into a deduplicated list
of canonical absolute paths, in the order the patterns were given.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from sourcegather.file_resolver.extensions import ExtensionPolicy
from sourcegather.file_resolver.types import ResolverConfig

logger = logging.getLogger(__name__)

# Characters that indicate a path is a glob pattern rather than a literal path.
_GLOB_CHARS = frozenset("*?[")

PatternInput = str | Path | Sequence[str | Path]

DirPredicate = Callable[[Path], bool]


def is_glob(pattern: str) -> bool:
    return any(c in pattern for c in _GLOB_CHARS)


def as_pattern_list(patterns: PatternInput) -> list[str]:
    """Accept a single pattern or a sequence of them."""
    if isinstance(patterns, (str, Path)):
        return [str(patterns)]
    return [str(p) for p in patterns]


@dataclass(frozen=True)
class Candidate:
    """
    A resolved file. `path` is canonical (symlinks resolved) and is what results
    are keyed and deduplicated on. `found` is the absolute path the file was
    reached by, which is what ignore rules are written against.
    """

    path: Path
    found: Path


class PatternResolver:
    """
    Turns patterns into candidate paths. Each pattern is handled as:
    - Existing file → that file, whatever its extension
    - Existing directory → walked recursively, keeping recognized extensions only
    - Contains glob characters → expanded; every matched file kept as-is
    - Otherwise → nothing (a miss is not an error)

    Relative patterns are resolved against `config.root`. If `skip_dir` is given,
    directories it returns true for are not descended into during a walk.
    """

    def __init__(
        self, config: ResolverConfig | None = None, skip_dir: DirPredicate | None = None
    ) -> None:
        self._config: ResolverConfig = config if config is not None else ResolverConfig()
        self._root: Path = self._config.root
        self._extensions: ExtensionPolicy = ExtensionPolicy(self._config.effective_extensions)
        self._skip_dir: DirPredicate | None = skip_dir

    @property
    def root(self) -> Path:
        return self._root

    @property
    def extensions(self) -> ExtensionPolicy:
        return self._extensions

    def resolve(self, patterns: PatternInput) -> list[Path]:
        """
        Resolve patterns into a deduplicated list of canonical paths. The first
        occurrence of a file decides its position.
        """
        return [candidate.path for candidate in self.resolve_candidates(patterns)]

    def resolve_candidates(self, patterns: PatternInput) -> list[Candidate]:
        """Like `resolve()`, but keeps the path each file was found by."""
        seen: set[Path] = set()
        result: list[Candidate] = []

        for pattern in as_pattern_list(patterns):
            found_any = False
            for found in self._resolve_one(pattern):
                found_any = True
                resolved = found.resolve()
                if resolved not in seen:
                    seen.add(resolved)
                    result.append(Candidate(resolved, found))
            if not found_any:
                logger.debug("Pattern matched no files: %s", pattern)

        return result

    def _resolve_one(self, pattern: str) -> Iterable[Path]:
        p = self._absolute(pattern)
        if p.is_file():
            return [p]
        if p.is_dir():
            return self._walk_directory(p)
        if is_glob(pattern):
            return self._expand_glob(pattern)
        return []

    def _absolute(self, pattern: str) -> Path:
        p = Path(pattern).expanduser()
        if not p.is_absolute():
            p = self._root / p
        # Lexical only: `.` and `..` go, symlinks stay.
        return Path(os.path.abspath(p))

    def _walk_directory(self, root: Path) -> Iterable[Path]:
        """
        Walk a directory tree with `os.walk()`, sorted per level so output is
        deterministic. Symlinked directories are followed once per real path.
        """
        visited: set[str] = set()

        for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
            real = os.path.realpath(dirpath)
            if real in visited:
                logger.debug("Skipping symlink cycle: %s -> %s", dirpath, real)
                dirnames[:] = []
                continue
            visited.add(real)

            # Sort and prune in-place; os.walk descends in this order
            dirnames[:] = sorted(
                d
                for d in dirnames
                if os.path.realpath(os.path.join(dirpath, d)) not in visited
                and not self._is_skipped(Path(dirpath) / d)
            )

            current = Path(dirpath)
            for filename in sorted(filenames):
                filepath = current / filename
                if self._extensions.is_recognized(filepath) and filepath.is_file():
                    yield filepath

    def _is_skipped(self, directory: Path) -> bool:
        if self._skip_dir is None or not self._skip_dir(directory):
            return False
        logger.debug("Not descending into %s", directory)
        return True

    def _expand_glob(self, pattern: str) -> Iterable[Path]:
        """Expand a glob against its literal prefix directory, in sorted order."""
        parts = Path(pattern).parts
        base = Path(".")
        glob_part = pattern
        for i, part in enumerate(parts):
            if is_glob(part):
                base = Path(*parts[:i]) if i > 0 else Path(".")
                glob_part = Path(*parts[i:]).as_posix()
                break

        # A trailing `**` only yields directories before Python 3.13.
        if glob_part == "**" or glob_part.endswith("/**"):
            glob_part += "/*"

        base = self._absolute(str(base))
        if not base.is_dir():
            return []
        return sorted(path for path in base.glob(glob_part) if path.is_file())
