"""Exceptions for viewdeps.

Exception Hierarchy:
DependencyError (base)
└── HandlerNotFoundError     # No template handler for an extension

ParseError (viewdeps.parser.errors) is separate: the parser records one
for each syntax error it recovers from, so callers never see it raised.

Analysis itself does not raise. A render call the analyzer refuses to
interpret produces an ``Unresolvable`` value (viewdeps.analysis.render),
and a template without a registered tracker has no dependencies.

Example:
    ```
    HandlerNotFoundError: No template handler registered for 'ebr'. Did you mean 'erb'?
    [V-HDL-001]
    ```

"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Searchable error codes.

    Format: V-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), HDL (handlers and trackers)
    """

    # Parser errors (V-PAR-xxx)
    SYNTAX_ERROR = "V-PAR-001"
    MISSING_TOKEN = "V-PAR-002"
    NESTING_TOO_DEEP = "V-PAR-003"

    # Handler errors (V-HDL-xxx)
    HANDLER_NOT_FOUND = "V-HDL-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'parser', 'handler')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "HDL": "handler",
        }.get(prefix, "unknown")


class DependencyError(Exception):
    """Base class for viewdeps errors."""

    code: ErrorCode | None = None

    def __init__(self, message: str, code: ErrorCode | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message}\n[{self.code.value}]"


class HandlerNotFoundError(DependencyError):
    """No template handler is registered for an extension."""

    code = ErrorCode.HANDLER_NOT_FOUND
