"""Structure nodes for the embedded-code AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from viewdeps.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Program(Node):
    """Root node: the statements of one compiled template."""

    body: Sequence[Node]
