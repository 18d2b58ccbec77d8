"""Render-call analysis.

- ``CallSiteCollector`` finds render/layout calls in a parsed template
- ``RenderParser`` normalizes and resolves them to ``RenderDependency`` records
- ``explicit_dependencies`` reads ``# Template Dependency:`` annotations
"""

from viewdeps.analysis.calls import (
    CallKind,
    CallSiteCollector,
    RenderInvocation,
    extract_render_calls,
)
from viewdeps.analysis.config import DEFAULT_CONFIG, AnalysisConfig
from viewdeps.analysis.explicit import EXPLICIT_DEPENDENCY, explicit_dependencies
from viewdeps.analysis.render import (
    KNOWN_OPTIONS,
    RenderDependency,
    RenderParser,
    Unresolvable,
)

__all__ = [
    "DEFAULT_CONFIG",
    "EXPLICIT_DEPENDENCY",
    "KNOWN_OPTIONS",
    "AnalysisConfig",
    "CallKind",
    "CallSiteCollector",
    "RenderDependency",
    "RenderInvocation",
    "RenderParser",
    "Unresolvable",
    "explicit_dependencies",
    "extract_render_calls",
]
