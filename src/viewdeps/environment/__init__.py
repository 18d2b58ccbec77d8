"""Template handlers, view paths, and the tracker registry.

``TrackerRegistry`` lives in ``viewdeps.environment.registry``; it is
re-exported from the top-level ``viewdeps`` package.
"""

from viewdeps.environment.exceptions import DependencyError, ErrorCode, HandlerNotFoundError
from viewdeps.environment.handlers import (
    ErbHandler,
    HandlerRegistry,
    RubyHandler,
    TemplateHandler,
)
from viewdeps.environment.loaders import (
    DictViewPath,
    FileSystemViewPath,
    TemplatePath,
    ViewPath,
)

__all__ = [
    "DependencyError",
    "DictViewPath",
    "ErbHandler",
    "ErrorCode",
    "FileSystemViewPath",
    "HandlerNotFoundError",
    "HandlerRegistry",
    "RubyHandler",
    "TemplateHandler",
    "TemplatePath",
    "ViewPath",
]
