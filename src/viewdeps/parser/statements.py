"""Statement conversion for the embedded-code parser.

Provides the program body, block bodies, and the generic fallback.
Compound statements are not modelled in detail: ``if``, ``case``,
``def`` and every other construct without a converter become an ``Other``
node whose children are its converted named children, which is all
call-site extraction needs.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from viewdeps.environment.exceptions import ErrorCode
from viewdeps.nodes import Other, Program

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as SyntaxNode

    from viewdeps.nodes import Node

# Block parts that hold parameters rather than statements
BLOCK_PARAMETER_TYPES = frozenset({"block_parameters", "lambda_parameters"})


class StatementConversionMixin:
    """Mixin for converting statement sequences.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        # From TreeNavigationMixin
        def _convert(self, node: SyntaxNode) -> Node: ...
        def _named(self, node: SyntaxNode) -> Iterator[SyntaxNode]: ...
        def _record_missing_tokens(self, node: SyntaxNode) -> None: ...
        def _location(self, node: SyntaxNode) -> tuple[int, int]: ...
        def _record_error(
            self, node: SyntaxNode, message: str, code: ErrorCode
        ) -> None: ...

    def _program(self, root: SyntaxNode) -> Program:
        # A source tree-sitter cannot recover at all has an ERROR root
        if root.is_error:
            self._record_error(root, "Unexpected syntax", ErrorCode.SYNTAX_ERROR)
        self._record_missing_tokens(root)
        body = tuple(self._convert(child) for child in self._named(root))
        return Program(1, 0, body=body)

    def _block_statements(self, block: SyntaxNode) -> tuple[Node, ...]:
        """Statements of a ``do ... end`` or ``{ ... }`` block."""
        self._record_missing_tokens(block)
        body = block.child_by_field_name("body")
        if body is not None:
            self._record_missing_tokens(body)
            return tuple(self._convert(child) for child in self._named(body))
        return tuple(
            self._convert(child)
            for child in self._named(block)
            if child.type not in BLOCK_PARAMETER_TYPES
        )

    def _convert_parenthesized_statements(self, node: SyntaxNode) -> Node:
        children = list(self._named(node))
        if len(children) == 1:
            return self._convert(children[0])
        return self._generic(node)

    def _generic(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        kind = "error" if node.is_error else node.type
        children = tuple(self._convert(child) for child in self._named(node))
        return Other(lineno, col_offset, kind=kind, children=children)
