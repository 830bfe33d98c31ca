"""
sourcegather: resolve file patterns, apply gitignore-style ignore rules, and parse
the surviving files for static analysis.
"""

from sourcegather.errors import (
    ConfigError,
    IgnoreFileError,
    SourceGatherError,
    SourceParseError,
)
from sourcegather.file_resolver import (
    ExtensionPolicy,
    IgnoreFilter,
    IgnoreRules,
    PatternResolver,
    ResolverConfig,
)
from sourcegather.ingest import FileOutcome, IngestResult, get_source_code_of_files, ingest
from sourcegather.source_code import Parser, SourceCode, TreeSitterParser

__all__ = [
    "ConfigError",
    "ExtensionPolicy",
    "FileOutcome",
    "IgnoreFileError",
    "IgnoreFilter",
    "IgnoreRules",
    "IngestResult",
    "Parser",
    "PatternResolver",
    "ResolverConfig",
    "SourceCode",
    "SourceGatherError",
    "SourceParseError",
    "TreeSitterParser",
    "get_source_code_of_files",
    "ingest",
]
