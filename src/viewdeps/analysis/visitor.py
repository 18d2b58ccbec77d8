"""Shared visitor patterns for viewdeps AST analysis.

Provides visit_children for generic traversal over the closed node set.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from viewdeps.nodes import iter_child_nodes

if TYPE_CHECKING:
    from viewdeps.nodes import Node


def visit_children(node: Node, visit: Callable[[Node], None]) -> None:
    """Visit all child nodes in source order (generic handler)."""
    for child in iter_child_nodes(node):
        visit(child)
