"""
File discovery: pattern resolution, extension policy, and gitignore-style
ignore filtering.

Usage::

    from sourcegather.file_resolver import IgnoreFilter, PatternResolver, ResolverConfig

    config = ResolverConfig(cwd="project", extensions=[".js", ".jsx"])
    ignore = IgnoreFilter.from_config(config)
    resolver = PatternResolver(config, skip_dir=ignore.is_excluded)
    files = [
        candidate.path
        for candidate in resolver.resolve_candidates(["src", "test/**/*.js"])
        if not ignore.excludes(candidate)
    ]
"""

from sourcegather.file_resolver.defaults import (
    DEFAULT_EXTENSIONS,
    DEFAULT_TOOL_NAME,
    default_ignore_filename,
)
from sourcegather.file_resolver.extensions import ExtensionPolicy
from sourcegather.file_resolver.gitignore import IgnoreFilter, IgnoreRules
from sourcegather.file_resolver.resolver import Candidate, PatternResolver
from sourcegather.file_resolver.types import ResolverConfig

__all__ = [
    "Candidate",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_TOOL_NAME",
    "ExtensionPolicy",
    "IgnoreFilter",
    "IgnoreRules",
    "PatternResolver",
    "ResolverConfig",
    "default_ignore_filename",
]
