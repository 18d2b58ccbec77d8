"""Base node class for the embedded-code AST."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for debug logging.
    Nodes are immutable and form a tree with no back-references.

    """

    lineno: int
    col_offset: int
