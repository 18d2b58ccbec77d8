"""viewdeps: static dependency analysis for server-rendered view templates.

Given a template's source, viewdeps finds the other templates it renders
without executing it, so a fragment cache can be invalidated when any of
them changes.

Quickstart:
    >>> from viewdeps import Template, TrackerRegistry
    >>> registry = TrackerRegistry.default()
    >>> erb = registry.handlers.for_extension("erb")
    >>> template = Template("<%= render 'form', post: @post %>", erb)
    >>> registry.find_dependencies("posts/edit", template)
    ['posts/_form']

Locals and controllers:
    >>> from viewdeps import AnalysisConfig, RenderParser
    >>> RenderParser("posts/index", "render @posts").render_calls()
    [RenderDependency(virtual_path='posts/_post', locals_keys=('post',))]
    >>> config = AnalysisConfig(from_controller=True)
    >>> RenderParser("posts_controller", "render 'posts/index', status: 404", config).render_calls()
    [RenderDependency(virtual_path='posts/index', locals_keys=())]

Architecture:
Template Source → Handler → Code → tree-sitter → Parser → AST → CallSiteCollector
→ RenderParser (normalize → resolve) → RenderDependency records

Explicit annotations (``# Template Dependency: shared/header``) are read
from the raw source and appended; ``dir/*`` annotations are expanded
against view paths.

Soundness:
A render call the analyzer cannot interpret statically (an unknown
option, an interpolated name, an unusual argument shape) contributes no
dependency at all. Omissions are covered by explicit annotations; wrong
guesses would not be.

Thread-Safety:
- Parsing and analysis use only per-call state
- HandlerRegistry and TrackerRegistry use copy-on-write with a write lock

"""

from viewdeps.analysis import (
    DEFAULT_CONFIG,
    AnalysisConfig,
    CallKind,
    CallSiteCollector,
    RenderDependency,
    RenderInvocation,
    RenderParser,
    Unresolvable,
    explicit_dependencies,
    extract_render_calls,
)
from viewdeps.environment import (
    DependencyError,
    DictViewPath,
    ErbHandler,
    ErrorCode,
    FileSystemViewPath,
    HandlerNotFoundError,
    HandlerRegistry,
    RubyHandler,
    TemplatePath,
    ViewPath,
)
from viewdeps.environment.registry import TrackerRegistry
from viewdeps.parser import ParseError, Parser, parse
from viewdeps.template import Template
from viewdeps.trackers import RegexTracker, RenderTracker

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "AnalysisConfig",
    "CallKind",
    "CallSiteCollector",
    "DependencyError",
    "DictViewPath",
    "ErbHandler",
    "ErrorCode",
    "FileSystemViewPath",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "ParseError",
    "Parser",
    "RegexTracker",
    "RenderDependency",
    "RenderInvocation",
    "RenderParser",
    "RenderTracker",
    "RubyHandler",
    "Template",
    "TemplatePath",
    "TrackerRegistry",
    "Unresolvable",
    "ViewPath",
    "__version__",
    "explicit_dependencies",
    "extract_render_calls",
    "parse",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'viewdeps' has no attribute {name!r}")
