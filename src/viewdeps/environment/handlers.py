"""Template handlers.

A handler turns a template's raw source into the code the analyzer
parses. Handlers are plain callables ``(template, source) -> str``; the
handler object is also the identity a TrackerRegistry keys trackers on.

Built-in Handlers:
- `ErbHandler`: Extract the Ruby code from ERB tags
- `RubyHandler`: Pass source through unchanged (``.ruby`` templates)

"""

from __future__ import annotations

import logging
import re
import threading
from typing import TYPE_CHECKING, Protocol

from viewdeps.environment.exceptions import HandlerNotFoundError

if TYPE_CHECKING:
    from viewdeps.template import Template

logger = logging.getLogger(__name__)


class TemplateHandler(Protocol):
    """Compile template source into analyzable code."""

    def __call__(self, template: Template, source: str) -> str: ...


# <%% is an escaped literal "<%"; otherwise <%, <%=, <%==, <%#, <%- with optional -%>
_ERB_TAG = re.compile(r"<%%|<%(?P<kind>==|=|#|-)?(?P<code>.*?)-?%>", re.DOTALL)


class ErbHandler:
    """Extract embedded Ruby from ERB markup.

    Each code tag contributes its code followed by a statement separator;
    comment tags and text contribute only their newlines, so line numbers
    in the compiled code match the template.

    Example:
        >>> ErbHandler()(template, "<h1><%= render 'title' %></h1>")
        " render 'title' ;"

    """

    __slots__ = ()

    def __call__(self, template: Template, source: str) -> str:
        return self.compile(source)

    def compile(self, source: str) -> str:
        parts: list[str] = []
        position = 0
        for match in _ERB_TAG.finditer(source):
            parts.append("\n" * source.count("\n", position, match.start()))
            position = match.end()
            if match.group(0) == "<%%":
                continue
            code = match.group("code")
            if match.group("kind") == "#":
                parts.append("\n" * code.count("\n"))
                continue
            parts.append(code)
            parts.append(self._separator(code))
        parts.append("\n" * source.count("\n", position))
        return "".join(parts)

    @staticmethod
    def _separator(code: str) -> str:
        # A trailing comment would swallow ";"
        last_line = code.rpartition("\n")[2]
        return "\n" if "#" in last_line else ";"

    def __repr__(self) -> str:
        return "ErbHandler()"


class RubyHandler:
    """Source is already code."""

    __slots__ = ()

    def __call__(self, template: Template, source: str) -> str:
        return source

    def __repr__(self) -> str:
        return "RubyHandler()"


class HandlerRegistry:
    """Map template extensions to handlers.

    All mutations use copy-on-write: readers always see a complete
    snapshot, and writers are serialized by a lock.

    Example:
        >>> handlers = HandlerRegistry.default()
        >>> handlers.extensions()
        ['erb', 'ruby']
        >>> handlers.for_extension("ebr")
        Traceback (most recent call last):
        HandlerNotFoundError: No template handler registered for 'ebr'. Did you mean 'erb'?

    """

    __slots__ = ("_handlers", "_lock")

    def __init__(self, handlers: dict[str, TemplateHandler] | None = None):
        self._handlers: dict[str, TemplateHandler] = {
            _normalize(ext): handler for ext, handler in (handlers or {}).items()
        }
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> HandlerRegistry:
        """Registry with ``erb`` and ``ruby`` handlers."""
        return cls({"erb": ErbHandler(), "ruby": RubyHandler()})

    def register(self, extension: str, handler: TemplateHandler) -> None:
        """Register ``handler`` for ``extension``; last write wins."""
        ext = _normalize(extension)
        with self._lock:
            new = self._handlers.copy()
            new[ext] = handler
            self._handlers = new
        logger.debug("Registered handler %r for %r", handler, ext)

    def unregister(self, extension: str) -> None:
        """Remove the handler for ``extension``. No-op if absent."""
        ext = _normalize(extension)
        with self._lock:
            if ext not in self._handlers:
                return
            new = self._handlers.copy()
            del new[ext]
            self._handlers = new
        logger.debug("Unregistered handler for %r", ext)

    def get(self, extension: str) -> TemplateHandler | None:
        return self._handlers.get(_normalize(extension))

    def for_extension(self, extension: str) -> TemplateHandler:
        """Handler registered for ``extension``.

        Raises:
            HandlerNotFoundError: If no handler is registered
        """
        ext = _normalize(extension)
        handler = self._handlers.get(ext)
        if handler is not None:
            return handler

        from difflib import get_close_matches

        available = sorted(self._handlers)
        msg = f"No template handler registered for '{ext}'"
        matches = get_close_matches(ext, available, n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{matches[0]}'?"
        elif available:
            msg += f". Available: {', '.join(available)}"
        raise HandlerNotFoundError(msg)

    def extensions(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and _normalize(extension) in self._handlers


def _normalize(extension: str) -> str:
    return extension.lstrip(".")
