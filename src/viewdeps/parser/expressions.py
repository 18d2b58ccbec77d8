"""Expression conversion for the embedded-code parser.

Converts the tree-sitter constructs render-call analysis looks at: calls
and their argument lists, hashes, strings, symbols, and variables.

Argument grouping follows Ruby: consecutive ``key: value`` pairs and
``**splat`` entries in an argument list form a single Hash argument.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from viewdeps.nodes import (
    Call,
    Hash,
    MethodChain,
    Other,
    StringLiteral,
    SymbolLiteral,
    VariableReference,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node as SyntaxNode

    from viewdeps.nodes import Node

# Pair-like entries of an argument list or hash literal
PAIR_TYPES = frozenset({"pair", "hash_splat_argument"})

# Escapes recognized inside single-quoted strings
_SINGLE_QUOTED_ESCAPE = re.compile(r"\\([\\'])")

_ESCAPES = {"n": "\n", "t": "\t", "s": " ", "r": "\r", "e": "\x1b", "0": "\0"}


def _unescape(sequence: str) -> str:
    """Decode a one-character escape; longer escapes are kept verbatim."""
    if len(sequence) != 2:
        return sequence
    return _ESCAPES.get(sequence[1], sequence[1])


class ExpressionConversionMixin:
    """Mixin for converting expressions.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        _source_bytes: bytes

        # From TreeNavigationMixin
        def _convert(self, node: SyntaxNode) -> Node: ...
        def _named(self, node: SyntaxNode) -> Iterator[SyntaxNode]: ...
        def _text(self, node: SyntaxNode) -> str: ...
        def _location(self, node: SyntaxNode) -> tuple[int, int]: ...
        def _record_missing_tokens(self, node: SyntaxNode) -> None: ...

        # From StatementConversionMixin
        def _block_statements(self, block: SyntaxNode) -> tuple[Node, ...]: ...

    # =========================================================================
    # Calls
    # =========================================================================

    def _convert_call(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        receiver_node = node.child_by_field_name("receiver")
        method_node = node.child_by_field_name("method")
        arguments = node.child_by_field_name("arguments")
        block = node.child_by_field_name("block")

        receiver = self._convert(receiver_node) if receiver_node is not None else None
        # ``foo.()`` has no method name
        method = self._text(method_node) if method_node is not None else "call"

        if receiver is not None and arguments is None and block is None:
            return MethodChain(lineno, col_offset, receiver=receiver, method=method)

        parenthesized = (
            arguments is not None
            and arguments.child_count > 0
            and arguments.children[0].type == "("
        )
        return Call(
            lineno,
            col_offset,
            receiver=receiver,
            method=method,
            args=self._arguments(arguments) if arguments is not None else (),
            block=self._block_statements(block) if block is not None else (),
            parenthesized=parenthesized,
        )

    def _arguments(self, argument_list: SyntaxNode) -> tuple[Node, ...]:
        args: list[Node] = []
        pairs: list[tuple[Node, Node]] = []
        hash_start: tuple[int, int] | None = None
        self._record_missing_tokens(argument_list)

        for child in self._named(argument_list):
            if child.type in PAIR_TYPES:
                if hash_start is None:
                    hash_start = self._location(child)
                pairs.append(self._pair(child))
                continue
            if hash_start is not None:
                args.append(Hash(*hash_start, pairs=tuple(pairs)))
                pairs = []
                hash_start = None
            args.append(self._convert(child))

        if hash_start is not None:
            args.append(Hash(*hash_start, pairs=tuple(pairs)))
        return tuple(args)

    # =========================================================================
    # Hashes
    # =========================================================================

    def _convert_hash(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        pairs: list[tuple[Node, Node]] = []
        for child in self._named(node):
            if child.type in PAIR_TYPES:
                pairs.append(self._pair(child))
            else:
                # Recovered garbage inside the braces; keep it reachable
                pairs.append((Other(*self._location(child), kind="error"), self._convert(child)))
        return Hash(lineno, col_offset, pairs=tuple(pairs))

    def _pair(self, node: SyntaxNode) -> tuple[Node, Node]:
        lineno, col_offset = self._location(node)
        self._record_missing_tokens(node)
        if node.type == "hash_splat_argument":
            values = [self._convert(child) for child in self._named(node)]
            value = values[0] if values else Other(lineno, col_offset, kind="missing")
            return Other(lineno, col_offset, kind="double_splat"), value

        key_node = node.child_by_field_name("key")
        value_node = node.child_by_field_name("value")

        if key_node is None:
            key: Node = Other(lineno, col_offset, kind="missing")
        elif key_node.type == "string" and not any(c.type == "=>" for c in node.children):
            # "name": value is a symbol key built from a string
            key = Other(*self._location(key_node), kind="dsymbol")
        else:
            key = self._convert(key_node)

        if value_node is None:
            # Ruby 3.1 shorthand: ``render "x", post:``
            value: Node = Other(lineno, col_offset, kind="omitted")
        else:
            value = self._convert(value_node)
        return key, value

    # =========================================================================
    # Strings and symbols
    # =========================================================================

    def _convert_string(self, node: SyntaxNode) -> Node:
        if self._has_interpolation(node):
            return self._interpolated(node, "dstring")
        lineno, col_offset = self._location(node)
        return StringLiteral(lineno, col_offset, value=self._string_value(node))

    def _convert_delimited_symbol(self, node: SyntaxNode) -> Node:
        if self._has_interpolation(node):
            return self._interpolated(node, "dsymbol")
        lineno, col_offset = self._location(node)
        return SymbolLiteral(lineno, col_offset, name=self._string_value(node))

    def _convert_simple_symbol(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        return SymbolLiteral(lineno, col_offset, name=self._text(node)[1:])

    def _convert_hash_key_symbol(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        return SymbolLiteral(lineno, col_offset, name=self._text(node))

    @staticmethod
    def _has_interpolation(node: SyntaxNode) -> bool:
        return any(child.type == "interpolation" for child in node.named_children)

    def _interpolated(self, node: SyntaxNode, kind: str) -> Node:
        """Interpolated string or symbol; children are the embedded statements."""
        lineno, col_offset = self._location(node)
        children: list[Node] = []
        for child in node.named_children:
            if child.type != "interpolation":
                continue
            converted = self._convert(child)
            if isinstance(converted, Other) and converted.kind == "interpolation":
                children.extend(converted.children)
            else:
                children.append(converted)
        return Other(lineno, col_offset, kind=kind, children=tuple(children))

    def _string_value(self, node: SyntaxNode) -> str:
        children = node.children
        if len(children) >= 2 and not children[0].is_named:
            opener = self._text(children[0]).lstrip(":")
            if opener.startswith("'") or opener.startswith("%q"):
                start = children[0].end_byte
                end = children[-1].start_byte if not children[-1].is_named else node.end_byte
                raw = self._source_bytes[start:end].decode("utf-8", "replace")
                return _SINGLE_QUOTED_ESCAPE.sub(r"\1", raw)

        parts = []
        for child in node.named_children:
            if child.type == "escape_sequence":
                parts.append(_unescape(self._text(child)))
            elif child.type == "string_content":
                parts.append(self._text(child))
        return "".join(parts)

    # =========================================================================
    # Variables
    # =========================================================================

    def _convert_identifier(self, node: SyntaxNode) -> Node:
        lineno, col_offset = self._location(node)
        return VariableReference(lineno, col_offset, name=self._text(node))

    _convert_instance_variable = _convert_identifier
    _convert_class_variable = _convert_identifier
    _convert_global_variable = _convert_identifier
    _convert_constant = _convert_identifier
