"""Tracker registry.

Maps template handlers to dependency trackers and is the entry point for
dependency lookups. A registry is an ordinary object: create one per
application (or per test) instead of sharing global state.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from viewdeps.analysis.config import DEFAULT_CONFIG, AnalysisConfig
from viewdeps.environment.handlers import HandlerRegistry

if TYPE_CHECKING:
    from viewdeps.environment.handlers import TemplateHandler
    from viewdeps.environment.loaders import ViewPath
    from viewdeps.template import Template

logger = logging.getLogger(__name__)

Tracker = Callable[[str, "Template", "Sequence[ViewPath] | None"], Sequence[str]]


class TrackerRegistry:
    """Dispatch dependency lookups to the tracker of a template's handler.

    A tracker is either an object with a ``call`` method (such as the
    RenderTracker class) or a plain callable. Trackers that do not set
    ``supports_view_paths = True`` are called as ``tracker(name, template)``.
    Trackers that set ``supports_config = True`` also receive the
    registry's AnalysisConfig as the ``config`` keyword argument.

    All mutations use copy-on-write for thread-safety: lookups read an
    immutable snapshot without locking.

    Example:
        >>> registry = TrackerRegistry.default()
        >>> erb = registry.handlers.for_extension("erb")
        >>> registry.find_dependencies("messages/show", Template("<%= render 'form' %>", erb))
        ['messages/_form']

    """

    __slots__ = ("_config", "_handlers", "_lock", "_trackers")

    def __init__(
        self,
        handlers: HandlerRegistry | None = None,
        config: AnalysisConfig | None = None,
    ):
        self._handlers = handlers or HandlerRegistry.default()
        self._config = config or DEFAULT_CONFIG
        self._trackers: dict[TemplateHandler, Tracker] = {}
        self._lock = threading.Lock()

    @classmethod
    def default(
        cls,
        handlers: HandlerRegistry | None = None,
        config: AnalysisConfig | None = None,
    ) -> TrackerRegistry:
        """Registry with RenderTracker registered for ``erb``."""
        from viewdeps.trackers import RenderTracker

        registry = cls(handlers, config)
        registry.register_tracker("erb", RenderTracker)
        return registry

    @property
    def handlers(self) -> HandlerRegistry:
        return self._handlers

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def register_tracker(self, extension: str, tracker: Any) -> None:
        """Use ``tracker`` for templates of ``extension``'s handler.

        Last write wins.

        Raises:
            HandlerNotFoundError: If no handler is registered for ``extension``
        """
        handler = self._handlers.for_extension(extension)
        call: Tracker = getattr(tracker, "call", tracker)
        if getattr(tracker, "supports_config", False):
            call = functools.partial(call, config=self._config)
        if not getattr(tracker, "supports_view_paths", False):
            call = _without_view_paths(call)
        with self._lock:
            new = self._trackers.copy()
            new[handler] = call
            self._trackers = new
        logger.debug("Registered tracker %r for %r", tracker, extension)

    def remove_tracker(self, handler: TemplateHandler | str) -> None:
        """Remove the tracker for a handler (or an extension's handler).

        No-op if none is registered.
        """
        if isinstance(handler, str):
            found = self._handlers.get(handler)
            if found is None:
                return
            handler = found
        with self._lock:
            if handler not in self._trackers:
                return
            new = self._trackers.copy()
            del new[handler]
            self._trackers = new
        logger.debug("Removed tracker for %r", handler)

    def tracker_for(self, handler: TemplateHandler) -> Tracker | None:
        return self._trackers.get(handler)

    def find_dependencies(
        self,
        name: str,
        template: Template,
        view_paths: Sequence[ViewPath] | None = None,
    ) -> list[str]:
        """Virtual paths ``template`` depends on.

        Templates whose handler has no tracker have no dependencies.
        """
        tracker = self._trackers.get(template.handler)
        if tracker is None:
            logger.debug("No tracker for %s (handler %r)", name, template.handler)
            return []
        dependencies = tracker(name, template, view_paths)
        if self._config.unique:
            return list(dict.fromkeys(dependencies))
        return list(dependencies)


def _without_view_paths(tracker: Callable[[str, Template], Sequence[str]]) -> Tracker:
    def call(name: str, template: Template, view_paths: Sequence[ViewPath] | None) -> Sequence[str]:
        return tracker(name, template)

    return call
