"""
Default extension and ignore-file settings for file discovery.
"""

from __future__ import annotations

DEFAULT_TOOL_NAME: str = "sourcegather"

# Suffixes recognized when a directory is expanded. Explicit files and glob
# matches are never checked against these.
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js",)


def default_ignore_filename(tool_name: str = DEFAULT_TOOL_NAME) -> str:
    """Name of the ignore file looked up in the resolution root, e.g. `.sourcegatherignore`."""
    return f".{tool_name}ignore"
