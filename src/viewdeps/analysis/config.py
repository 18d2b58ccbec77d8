"""Configuration for render-call analysis."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Settings shared by the call-site collector, RenderParser and registries.

    Attributes:
        from_controller: Analyze controller code instead of a view. A bare
            ``render "x"`` then names a template rather than a partial, and
            ``layout "x"`` declarations are resolved.
        unique: Remove duplicate virtual paths from ``find_dependencies``
            results, keeping the first occurrence.
        render_methods: Receiverless method names treated as render calls.
        layout_methods: Receiverless method names treated as layout declarations.

    Example:
        >>> config = AnalysisConfig(from_controller=True)
        >>> RenderParser("posts/index", code, config=config).render_calls()

    """

    from_controller: bool = False
    unique: bool = True
    render_methods: frozenset[str] = frozenset({"render", "render_to_string"})
    layout_methods: frozenset[str] = frozenset({"layout"})


DEFAULT_CONFIG = AnalysisConfig()
