"""Syntax-tree navigation for the embedded-code parser.

Provides the primitives every conversion mixin builds on: node text,
locations, error recording, and ``_convert``, the single entry point that
dispatches a tree-sitter node to its ``_convert_<type>`` method.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import tree_sitter_ruby
from tree_sitter import Language
from tree_sitter import Node as SyntaxNode

from viewdeps.environment.exceptions import ErrorCode
from viewdeps.nodes import Other
from viewdeps.parser.errors import ParseError

if TYPE_CHECKING:
    from viewdeps.nodes import Node

logger = logging.getLogger(__name__)

RUBY_LANGUAGE = Language(tree_sitter_ruby.language())

# Nesting limit for the syntax tree; deeper subtrees become Other("error")
MAX_DEPTH = 100


class TreeNavigationMixin:
    """Dispatch and bookkeeping over tree-sitter nodes.

    Host attributes are declared via inline TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        # Host attributes (from Parser.__init__)
        _source: str
        _source_bytes: bytes
        _filename: str | None
        _depth: int
        _converters: dict[str, Callable[[SyntaxNode], Node]]
        errors: list[ParseError]

        # From StatementConversionMixin
        def _generic(self, node: SyntaxNode) -> Node: ...

    def _convert(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        if node.is_missing:
            self._record_error(node, f"Missing {node.type!r}", ErrorCode.MISSING_TOKEN)
            return Other(lineno, col_offset, kind="missing")
        if node.is_error:
            self._record_error(node, "Unexpected syntax", ErrorCode.SYNTAX_ERROR)
        self._record_missing_tokens(node)

        self._depth += 1
        try:
            if self._depth > MAX_DEPTH:
                self._record_error(node, "Nesting too deep", ErrorCode.NESTING_TOO_DEEP)
                return Other(lineno, col_offset, kind="error")
            converter = self._converters.get(node.type, self._generic)
            return converter(node)
        finally:
            self._depth -= 1

    def _record_missing_tokens(self, node: SyntaxNode) -> None:
        """Record missing punctuation and keywords, which are unnamed children."""
        if not node.has_error:
            return
        for child in node.children:
            if child.is_missing and not child.is_named:
                self._record_error(child, f"Missing {child.type!r}", ErrorCode.MISSING_TOKEN)

    def _named(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        """Named children, comments excluded."""
        for child in node.named_children:
            if child.type != "comment":
                yield child

    def _text(self, node: SyntaxNode) -> str:
        return self._source_bytes[node.start_byte : node.end_byte].decode("utf-8", "replace")

    @staticmethod
    def _location(node: SyntaxNode) -> tuple[int, int]:
        row, column = node.start_point
        return row + 1, column

    def _record_error(self, node: SyntaxNode, message: str, code: ErrorCode) -> None:
        lineno, col_offset = self._location(node)
        error = ParseError(
            message,
            lineno,
            col_offset,
            source=self._source,
            filename=self._filename,
            code=code,
        )
        logger.debug("Recovered from syntax error:%s", error)
        self.errors.append(error)
