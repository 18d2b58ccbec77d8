"""Expression nodes for the embedded-code AST.

The node set is closed: the parser produces only these kinds, and the
analysis code branches on them with ``isinstance``. Anything the analysis
has no use for is an ``Other`` node that still carries its children, so
render calls nested inside arbitrary expressions remain reachable.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from viewdeps.nodes.base import Node


@dataclass(frozen=True, slots=True)
class StringLiteral(Node):
    """String without interpolation: 'form' or "form"."""

    value: str


@dataclass(frozen=True, slots=True)
class SymbolLiteral(Node):
    """Symbol or hash label: :partial, partial:"""

    name: str


@dataclass(frozen=True, slots=True)
class Hash(Node):
    """Hash literal or bare trailing hash: {a: 1} / render x, a: 1

    Pairs keep source order. A ``**splat`` entry is stored with an
    ``Other("double_splat")`` key.
    """

    pairs: Sequence[tuple[Node, Node]]


@dataclass(frozen=True, slots=True)
class Call(Node):
    """Method call: render("form"), render partial: "x" do ... end

    Attributes:
        receiver: Explicit receiver, or None for a receiverless call
        method: Method name
        args: Positional arguments; trailing pairs are grouped into one Hash
        block: Statements of an attached do/brace block
        parenthesized: True if the arguments were written in parentheses
    """

    receiver: Node | None
    method: str
    args: Sequence[Node] = ()
    block: Sequence[Node] = ()
    parenthesized: bool = False


@dataclass(frozen=True, slots=True)
class VariableReference(Node):
    """Variable, constant or bare identifier: post, @post, @@posts, $posts, Post"""

    name: str

    @property
    def root_name(self) -> str:
        """Name without the ``$``/``@``/``@@`` sigil."""
        return self.name.lstrip("@$")


@dataclass(frozen=True, slots=True)
class MethodChain(Node):
    """Zero-argument method on a receiver: @post.comments, a.b.c"""

    receiver: Node
    method: str


@dataclass(frozen=True, slots=True)
class Other(Node):
    """Any other expression: numbers, arrays, operators, interpolated strings.

    ``kind`` names the construct (e.g. "dstring", "array", "binary").
    """

    kind: str
    children: Sequence[Node] = ()
