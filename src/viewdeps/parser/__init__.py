"""Parser for code embedded in view templates.

Parses Ruby with tree-sitter and converts the concrete syntax tree into
the closed ``viewdeps.nodes`` tree. The converter is assembled from mixins:

- TreeNavigationMixin: dispatch, node text, error recording
- StatementConversionMixin: program, block bodies, generic fallback
- ExpressionConversionMixin: calls, arguments, literals, variables

Parsing never fails as a whole. tree-sitter recovers from syntax errors
itself; every ERROR or MISSING node is recorded in ``Parser.errors`` and
the recovered subtree is still converted, so render calls around a
malformed statement stay reachable.

Example:
    >>> program = parse("render 'form', locals: {post: @post}")
    >>> program.body[0].method
    'render'

"""

from __future__ import annotations

from tree_sitter import Parser as TreeSitterParser

from viewdeps.nodes import Program
from viewdeps.parser.core import MAX_DEPTH, RUBY_LANGUAGE, TreeNavigationMixin
from viewdeps.parser.errors import ParseError
from viewdeps.parser.expressions import ExpressionConversionMixin
from viewdeps.parser.statements import StatementConversionMixin

__all__ = ["MAX_DEPTH", "ParseError", "Parser", "parse"]


class Parser(TreeNavigationMixin, StatementConversionMixin, ExpressionConversionMixin):
    """Converter from a tree-sitter Ruby parse to ``viewdeps.nodes``.

    Args:
        source: Ruby source compiled from a template
        filename: Template name, used in error messages

    """

    def __init__(self, source: str, filename: str | None = None):
        self._source = source
        self._source_bytes = source.encode("utf-8", "replace")
        self._filename = filename
        self._depth = 0
        self._tree_sitter = TreeSitterParser(RUBY_LANGUAGE)
        self._converters = {
            name.removeprefix("_convert_"): getattr(self, name)
            for name in dir(self)
            if name.startswith("_convert_")
        }
        self.errors: list[ParseError] = []

    def parse(self) -> Program:
        """Parse the whole source into a Program."""
        tree = self._tree_sitter.parse(self._source_bytes)
        return self._program(tree.root_node)


def parse(source: str, filename: str | None = None) -> Program:
    """Parse ``source``."""
    return Parser(source, filename).parse()
