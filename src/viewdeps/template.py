"""Template values handed to dependency trackers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from viewdeps.environment.handlers import TemplateHandler


@dataclass(frozen=True, slots=True)
class Template:
    """A template's raw source and the handler that compiles it.

    Attributes:
        source: Raw template source (markup and embedded code)
        handler: Callable ``(template, source) -> code``; also the key a
            TrackerRegistry uses to pick a tracker
        virtual_path: Template name, when known
        format: Output format (e.g. "html"), informational

    Example:
        >>> handlers = HandlerRegistry.default()
        >>> template = Template("<%= render 'form' %>", handlers.for_extension("erb"))
        >>> template.compile()
        " render 'form' ;"

    """

    source: str
    handler: TemplateHandler
    virtual_path: str | None = None
    format: str | None = None

    def compile(self) -> str:
        """Code the handler extracts from the source."""
        return self.handler(self, self.source)
