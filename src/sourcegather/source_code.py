"""
Parsed source representation and the parser interface ingestion depends on.

The default parser is tree-sitter based. Tree-sitter always produces a tree, so
a tree containing `ERROR` or missing nodes is reported as a `SourceParseError`.
"""

from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Protocol

import tree_sitter

from sourcegather.errors import SourceParseError

logger = logging.getLogger(__name__)

BOM = "\ufeff"

# Line terminators recognized by ECMAScript.
_LINE_BREAK_RE = re.compile(r"\r\n|[\r\n\u2028\u2029]")

SUPPORTED_LANGUAGES: dict[str, str] = {
    "javascript": "tree_sitter_javascript",
}


@dataclass(frozen=True)
class SourceCode:
    """One parsed file. `text` has any byte order mark removed."""

    path: Path
    text: str
    tree: Any = None
    has_bom: bool = False

    @cached_property
    def lines(self) -> list[str]:
        return _LINE_BREAK_RE.split(self.text)

    @property
    def valid(self) -> bool:
        """False when the syntax tree contains error nodes."""
        if self.tree is None:
            return True
        return not self.tree.root_node.has_error

    @classmethod
    def from_text(cls, text: str, path: Path, tree: Any = None) -> SourceCode:
        has_bom = text.startswith(BOM)
        return cls(path=path, text=text[1:] if has_bom else text, tree=tree, has_bom=has_bom)


class Parser(Protocol):
    """Turns file text into a `SourceCode`, raising on failure."""

    def parse(self, text: str, path: Path) -> SourceCode: ...


def _first_error_node(root: Any) -> Any | None:
    """Depth-first search for the first `ERROR` or missing node, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


class TreeSitterParser:
    """
    Tree-sitter parser for one language. The grammar module is imported the first
    time a file is parsed.
    """

    def __init__(self, language: str = "javascript") -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language {language!r} (supported: {', '.join(SUPPORTED_LANGUAGES)})"
            )
        self.language: str = language
        self._parser: tree_sitter.Parser | None = None

    def _get_parser(self) -> tree_sitter.Parser:
        if self._parser is None:
            module = importlib.import_module(SUPPORTED_LANGUAGES[self.language])
            lang = module.language()
            if not isinstance(lang, tree_sitter.Language):
                lang = tree_sitter.Language(lang)
            self._parser = tree_sitter.Parser(lang)
            logger.debug("Loaded tree-sitter grammar for %s", self.language)
        return self._parser

    def parse(self, text: str, path: Path) -> SourceCode:
        source = SourceCode.from_text(text, path)
        tree = self._get_parser().parse(source.text.encode("utf-8"))
        error = _first_error_node(tree.root_node)
        if error is not None:
            row, column = error.start_point[0], error.start_point[1]
            if error.is_missing:
                message = f"Missing {error.type}"
            else:
                message = "Unexpected token"
            raise SourceParseError(path, message, line=row + 1, column=column + 1)
        return SourceCode(path=path, text=source.text, tree=tree, has_bom=source.has_bom)
