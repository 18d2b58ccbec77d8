"""AST nodes for code embedded in view templates."""

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
from viewdeps.nodes.queries import (
    hash_pairs,
    iter_child_nodes,
    reference_name,
    string_value,
    symbol_name,
)
from viewdeps.nodes.structure import Program

__all__ = [
    "Call",
    "Hash",
    "MethodChain",
    "Node",
    "Other",
    "Program",
    "StringLiteral",
    "SymbolLiteral",
    "VariableReference",
    "hash_pairs",
    "iter_child_nodes",
    "reference_name",
    "string_value",
    "symbol_name",
]
