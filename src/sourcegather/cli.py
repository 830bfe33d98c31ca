#!/usr/bin/env python3
"""
sourcegather: Resolve, filter, and parse source files for static analysis

Common usage:
  sourcegather src/
  sourcegather "lib/**/*.js" test/
  sourcegather --ext .js --ext .jsx src/
  sourcegather --list-files .

Files are matched against `.sourcegatherignore` in the resolution root (see --cwd).
Settings can also live in `.sourcegather.toml`, `sourcegather.toml`, or
`pyproject.toml` under `[tool.sourcegather]`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from sourcegather.config import find_config_file, load_config, merge_cli_with_config
from sourcegather.errors import ConfigError, SourceParseError
from sourcegather.file_resolver import IgnoreFilter, PatternResolver, ResolverConfig
from sourcegather.ingest import FileOutcome, ingest


@dataclass
class Options:
    """Command-line options for the sourcegather tool."""

    patterns: list[str]
    extensions: list[str] | None
    cwd: str | None
    ignore: bool
    ignore_path: str | None
    ignore_pattern: list[str]
    list_files: bool
    verbose: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which settings the user passed on the command line, so they win over the
    config file.
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="sourcegather",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        type=str,
        default=[],
        help="Files, directories, or glob patterns to process",
    )
    parser.add_argument(
        "--ext",
        action="append",
        default=None,
        dest="extensions",
        metavar="EXT",
        help="File extension to use when expanding directories (default: .js). Can be repeated",
    )
    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        metavar="DIR",
        help="Root that relative patterns and the ignore file are resolved against "
        "(default: current directory)",
    )
    parser.add_argument(
        "--no-ignore",
        action="store_true",
        dest="no_ignore",
        help="Disable use of the ignore file and --ignore-pattern rules",
    )
    parser.add_argument(
        "--ignore-path",
        type=str,
        default=None,
        metavar="FILE",
        help="Ignore file to use instead of .sourcegatherignore in the root",
    )
    parser.add_argument(
        "--ignore-pattern",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Additional gitignore-style rule, applied after the ignore file. Can be repeated",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the files that would be parsed, without parsing them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # append actions default to None, so a list means the flag was supplied
    explicit_flags: set[str] = set()
    if opts.extensions is not None:
        explicit_flags.add("extensions")
    if opts.no_ignore:
        explicit_flags.add("ignore")
    if opts.ignore_path is not None:
        explicit_flags.add("ignore_path")
    if opts.ignore_pattern is not None:
        explicit_flags.add("ignore_pattern")

    return (
        Options(
            patterns=opts.patterns,
            extensions=opts.extensions,
            cwd=opts.cwd,
            ignore=not opts.no_ignore,
            ignore_path=opts.ignore_path,
            ignore_pattern=opts.ignore_pattern or [],
            list_files=opts.list_files,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _resolver_config(options: Options) -> ResolverConfig:
    return ResolverConfig(
        extensions=options.extensions,
        cwd=options.cwd,
        ignore=options.ignore,
        ignore_path=options.ignore_path,
        ignore_pattern=list(options.ignore_pattern),
    )


def _describe(outcome: FileOutcome) -> str:
    if outcome.ok:
        return f"ok     {outcome.path}"
    error = outcome.error
    if isinstance(error, SourceParseError):
        if error.line is not None:
            return f"error  {outcome.path}:{error.line}:{error.column}: {error.message}"
        return f"error  {outcome.path}: {error.message}"
    return f"error  {outcome.path}: {error}"


def _list_files(config: ResolverConfig, patterns: list[str]) -> None:
    ignore_filter = IgnoreFilter.from_config(config)
    resolver = PatternResolver(config, skip_dir=ignore_filter.is_excluded)
    for candidate in resolver.resolve_candidates(patterns):
        if not ignore_filter.excludes(candidate):
            print(candidate.path)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the sourcegather CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 if every file parsed, 1 if any file failed to parse,
        2 for usage or configuration errors
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("sourcegather")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not options.patterns:
        print(
            "Error: No input specified. Provide files, directories, or glob patterns"
            " (use '.' for current directory, --help for more options).",
            file=sys.stderr,
        )
        return 2

    root = Path(options.cwd) if options.cwd is not None else Path.cwd()
    try:
        config_path = find_config_file(root)
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)

        config = _resolver_config(options)
        if options.list_files:
            _list_files(config, options.patterns)
            return 0

        result = ingest(
            options.patterns,
            config,
            on_file=lambda outcome: print(_describe(outcome)),
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        # Bad option values, like an empty --ext.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"{result.count} file(s) parsed")
    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
