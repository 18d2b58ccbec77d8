"""Call-site extraction for render analysis.

Finds every receiverless ``render``, ``render_to_string`` and ``layout``
call in a parsed template, in source order. Calls on an explicit receiver
(``view.render``) and names that merely contain "render" (``rendering``,
``surrender``) are not render calls.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from viewdeps.analysis.config import DEFAULT_CONFIG, AnalysisConfig
from viewdeps.analysis.visitor import visit_children

if TYPE_CHECKING:
    from viewdeps.nodes import Call, Node


class CallKind(Enum):
    """Group a render-like call belongs to."""

    RENDER = "render"
    LAYOUT = "layout"


@dataclass(frozen=True, slots=True)
class RenderInvocation:
    """One discovered call site.

    Attributes:
        kind: RENDER for render/render_to_string, LAYOUT for layout
        method: Method name as written in the source
        arguments: Argument nodes; trailing pairs are one ``Hash``
        lineno: Line of the call in the compiled template code
    """

    kind: CallKind
    method: str
    arguments: tuple[Node, ...]
    lineno: int = 0


class CallSiteCollector:
    """Collect render and layout invocations from an AST.

    Groups appear in the order their first call is encountered; within a
    group, calls keep source order (top to bottom, left to right). A render
    nested in another render's arguments or block follows its parent.

    Thread-safe: Creates new state for each collect() call.

    Example:
        >>> calls = CallSiteCollector().collect(parse("render 'a'\\nlayout 'b'"))
        >>> [kind.value for kind in calls]
        ['render', 'layout']

    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG
        self._calls: dict[CallKind, list[RenderInvocation]] = {}
        self._dispatch: dict[str, Callable[..., None]] = {}
        for name in dir(self):
            if name.startswith("_visit_"):
                method = getattr(self, name)
                if callable(method):
                    self._dispatch[name[7:]] = method

    def collect(self, root: Node) -> dict[CallKind, list[RenderInvocation]]:
        """Return the invocations under ``root``, grouped by kind."""
        self._calls = {}
        self._visit(root)
        return self._calls

    def _visit(self, node: Node) -> None:
        handler = self._dispatch.get(type(node).__name__.lower())
        if handler:
            handler(node)
        else:
            visit_children(node, self._visit)

    def _visit_call(self, node: Call) -> None:
        kind = self._kind_of(node)
        if kind is not None:
            invocation = RenderInvocation(
                kind=kind,
                method=node.method,
                arguments=tuple(node.args),
                lineno=node.lineno,
            )
            self._calls.setdefault(kind, []).append(invocation)
        visit_children(node, self._visit)

    def _kind_of(self, node: Call) -> CallKind | None:
        if node.receiver is not None:
            return None
        if node.method in self._config.render_methods:
            return CallKind.RENDER
        if node.method in self._config.layout_methods:
            return CallKind.LAYOUT
        return None


def extract_render_calls(
    root: Node, config: AnalysisConfig | None = None
) -> dict[CallKind, list[RenderInvocation]]:
    """Collect render and layout invocations from ``root``."""
    return CallSiteCollector(config).collect(root)
