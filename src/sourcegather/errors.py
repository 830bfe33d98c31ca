"""Exception types raised by sourcegather."""

from __future__ import annotations

from pathlib import Path


class SourceGatherError(Exception):
    """Base class for all sourcegather errors."""


class ConfigError(SourceGatherError):
    """A configuration source exists but is malformed or unreadable. Fatal to the run."""


class IgnoreFileError(ConfigError):
    """The ignore-pattern file exists but cannot be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read ignore file {path}: {reason}")


class SourceParseError(SourceGatherError):
    """
    A file's text could not be turned into a `SourceCode`. Per-file and non-fatal:
    ingestion records it and moves on to the next file.
    """

    def __init__(
        self, path: Path, message: str, line: int | None = None, column: int | None = None
    ) -> None:
        self.path = path
        self.message = message
        self.line = line
        self.column = column
        location = f"{line}:{column}: " if line is not None and column is not None else ""
        super().__init__(f"{path}: {location}{message}")
