"""Recognized file-name suffixes for directory expansion."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from sourcegather.file_resolver.defaults import DEFAULT_EXTENSIONS


def normalize_extension(ext: str) -> str:
    """`js` and `.js` both become `.js`."""
    ext = ext.strip()
    if not ext:
        raise ValueError("Empty file extension")
    return ext if ext.startswith(".") else f".{ext}"


class ExtensionPolicy:
    """
    Ordered set of recognized suffixes. Matching is a case-sensitive suffix test
    on the file name, so multi-part suffixes like `.d.ts` work too.

    Only consulted when a directory is expanded: a file named explicitly or
    matched by a glob is taken as-is.
    """

    def __init__(self, extensions: Iterable[str] | None = None) -> None:
        source = DEFAULT_EXTENSIONS if extensions is None else extensions
        # dict.fromkeys keeps first-seen order while dropping duplicates
        self._extensions: tuple[str, ...] = tuple(
            dict.fromkeys(normalize_extension(ext) for ext in source)
        )

    @property
    def extensions(self) -> tuple[str, ...]:
        return self._extensions

    def is_recognized(self, path: str | Path) -> bool:
        name = Path(path).name
        return any(name.endswith(ext) for ext in self._extensions)

    def __repr__(self) -> str:
        return f"ExtensionPolicy({list(self._extensions)!r})"
