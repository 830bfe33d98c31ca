"""Configuration types for file resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from sourcegather.file_resolver.defaults import (
    DEFAULT_EXTENSIONS,
    DEFAULT_TOOL_NAME,
    default_ignore_filename,
)


@dataclass
class ResolverConfig:
    """
    Configuration for pattern resolution, ignore filtering, and ingestion.

    `extensions=None` means use `DEFAULT_EXTENSIONS`. `cwd=None` means the process
    working directory at the time the config is used; every relative pattern and
    ignore path is resolved against `root`, never the ambient working directory.
    `ignore_path=None` means `.{tool_name}ignore` in the root. `ignore_pattern`
    rules are appended after the ones read from the ignore file.
    """

    extensions: list[str] | None = None
    cwd: str | Path | None = None
    ignore: bool = True
    ignore_path: str | Path | None = None
    ignore_pattern: list[str] = field(default_factory=list)
    tool_name: str = DEFAULT_TOOL_NAME

    @property
    def root(self) -> Path:
        """Canonical resolution root."""
        base = Path(self.cwd) if self.cwd is not None else Path.cwd()
        return base.resolve()

    @property
    def effective_extensions(self) -> list[str]:
        """Configured extensions, or the defaults when unset."""
        if self.extensions is None:
            return list(DEFAULT_EXTENSIONS)
        return list(self.extensions)

    @property
    def effective_ignore_path(self) -> Path:
        """Absolute location of the ignore-pattern file."""
        if self.ignore_path is None:
            return self.root / default_ignore_filename(self.tool_name)
        path = Path(self.ignore_path).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path
