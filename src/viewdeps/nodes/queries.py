"""Typed queries over AST nodes.

Small helpers that answer "is this a string literal / symbol / hash, and
what does it hold?" so analysis code never reaches into node fields for
kinds it did not check. Each returns None when the node is not of the
asked-for kind.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from viewdeps.nodes.base import Node
from viewdeps.nodes.expressions import (
    Call,
    Hash,
    MethodChain,
    Other,
    StringLiteral,
    SymbolLiteral,
    VariableReference,
)
from viewdeps.nodes.structure import Program


def string_value(node: Node) -> str | None:
    """Literal text of a non-interpolated string."""
    if isinstance(node, StringLiteral):
        return node.value
    return None


def symbol_name(node: Node) -> str | None:
    """Name of a symbol or hash label."""
    if isinstance(node, SymbolLiteral):
        return node.name
    return None


def hash_pairs(node: Node) -> Sequence[tuple[Node, Node]] | None:
    """Key/value pairs of a hash literal, in source order."""
    if isinstance(node, Hash):
        return node.pairs
    return None


def reference_name(node: Node) -> str | None:
    """Name an object-like expression refers to.

    ``@post`` → ``post``, ``comment`` → ``comment``,
    ``@post.comments`` → ``comments`` (the last method in the chain).
    """
    if isinstance(node, VariableReference):
        return node.root_name or None
    if isinstance(node, MethodChain):
        return node.method
    return None


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in source order."""
    if isinstance(node, Program):
        yield from node.body
    elif isinstance(node, Call):
        if node.receiver is not None:
            yield node.receiver
        yield from node.args
        yield from node.block
    elif isinstance(node, Hash):
        for key, value in node.pairs:
            yield key
            yield value
    elif isinstance(node, MethodChain):
        yield node.receiver
    elif isinstance(node, Other):
        yield from node.children
