"""
Ingestion: resolve patterns, drop ignored candidates, parse the rest.

A file that can't be read or parsed is left out of the result and the run moves
on. Only configuration errors (such as an unreadable ignore file) are raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from sourcegather.file_resolver import IgnoreFilter, PatternResolver, ResolverConfig
from sourcegather.file_resolver.resolver import PatternInput
from sourcegather.source_code import Parser, SourceCode, TreeSitterParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileOutcome:
    """Result of attempting one non-excluded candidate."""

    path: Path
    source: SourceCode | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.source is not None


@dataclass
class IngestResult:
    """
    `sources` maps each successfully parsed file to its `SourceCode`, in resolution
    order. `failures` holds the files that were attempted but could not be read or
    parsed. `excluded` lists candidates dropped by the ignore filter; files under
    an excluded directory are never visited and so aren't listed.
    """

    sources: dict[Path, SourceCode] = field(default_factory=dict)
    failures: dict[Path, Exception] = field(default_factory=dict)
    excluded: list[Path] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.sources)

    @property
    def attempted(self) -> int:
        return len(self.sources) + len(self.failures)


FileCallback = Callable[[FileOutcome], None]
CompleteCallback = Callable[[int], None]


def _load_file(path: Path, parser: Parser) -> FileOutcome:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return FileOutcome(path, error=e)
    try:
        source = parser.parse(text, path)
    except Exception as e:
        # Any parser failure is per-file; the remaining files are still processed.
        logger.warning("Could not parse %s: %s", path, e)
        return FileOutcome(path, error=e)
    return FileOutcome(path, source=source)


def ingest(
    patterns: PatternInput,
    config: ResolverConfig | None = None,
    *,
    parser: Parser | None = None,
    on_file: FileCallback | None = None,
    on_complete: CompleteCallback | None = None,
) -> IngestResult:
    """
    Resolve `patterns`, skip candidates the ignore filter excludes, and parse each
    remaining file in order.

    `on_file` is called once per attempted (non-excluded) file with its outcome.
    `on_complete` is called once at the end with the number of files parsed.

    Raises `ConfigError` if the ignore file exists but can't be read.
    """
    config = config if config is not None else ResolverConfig()
    parser = parser if parser is not None else TreeSitterParser()

    ignore_filter = IgnoreFilter.from_config(config)
    resolver = PatternResolver(config, skip_dir=ignore_filter.is_excluded)
    candidates = resolver.resolve_candidates(patterns)
    logger.debug("Resolved %d candidate files", len(candidates))

    result = IngestResult()
    for candidate in candidates:
        path = candidate.path
        if ignore_filter.excludes(candidate):
            logger.debug("Ignoring %s", candidate.found)
            result.excluded.append(path)
            continue

        outcome = _load_file(path, parser)
        if outcome.source is not None:
            result.sources[path] = outcome.source
        elif outcome.error is not None:
            result.failures[path] = outcome.error

        if on_file is not None:
            on_file(outcome)

    if on_complete is not None:
        on_complete(result.count)
    return result


_OPTION_ALIASES: dict[str, str] = {
    "ignorePath": "ignore_path",
    "ignorePattern": "ignore_pattern",
    "toolName": "tool_name",
}


def _config_from_options(options: Mapping[str, Any]) -> ResolverConfig:
    """Build a `ResolverConfig` from a plain options mapping; unknown keys are ignored."""
    known = {f.name for f in fields(ResolverConfig)}
    kwargs: dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name in known and value is not None:
            kwargs[name] = value
    if isinstance(kwargs.get("ignore_pattern"), str):
        kwargs["ignore_pattern"] = [kwargs["ignore_pattern"]]
    return ResolverConfig(**kwargs)


def get_source_code_of_files(
    patterns: PatternInput,
    options: ResolverConfig | Mapping[str, Any] | Callable[..., Any] | None = None,
    callback: Callable[..., Any] | None = None,
    *,
    parser: Parser | None = None,
) -> dict[Path, SourceCode]:
    """
    Return a mapping of absolute path to `SourceCode` for every file matched by
    `patterns` that isn't ignored and parses cleanly.

    `callback`, if given, is called with the `SourceCode` (or `None` on failure)
    for each attempted file, then one last time with the number of files parsed.
    A callable passed as `options` is used as the callback.
    """
    if callable(options):
        if callback is None:
            callback = options
        options = None

    if options is None:
        config = ResolverConfig()
    elif isinstance(options, ResolverConfig):
        config = options
    else:
        config = _config_from_options(options)

    on_file: FileCallback | None = None
    if callback is not None:
        per_file = callback

        def _report_file(outcome: FileOutcome) -> None:
            per_file(outcome.source)

        on_file = _report_file

    result = ingest(patterns, config, parser=parser, on_file=on_file, on_complete=callback)
    return result.sources
