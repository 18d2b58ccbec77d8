"""Tree-based dependency tracker."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from viewdeps.analysis.config import DEFAULT_CONFIG, AnalysisConfig
from viewdeps.analysis.explicit import explicit_dependencies
from viewdeps.analysis.render import RenderDependency, RenderParser

if TYPE_CHECKING:
    from viewdeps.environment.loaders import ViewPath
    from viewdeps.template import Template


class RenderTracker:
    """Find a template's dependencies by parsing its embedded code.

    Compiles the template with its handler, resolves every render call in
    view mode, then appends the explicit annotations found in the raw
    source.

    Example:
        >>> RenderTracker.call("messages/show", template)
        ['messages/_form', 'shared/header']

    """

    supports_view_paths = True
    supports_config = True

    __slots__ = ("_config", "_name", "_template", "_view_paths")

    def __init__(
        self,
        name: str,
        template: Template,
        view_paths: Sequence[ViewPath] | None = None,
        config: AnalysisConfig | None = None,
    ):
        self._name = name
        self._template = template
        self._view_paths = view_paths
        self._config = config or DEFAULT_CONFIG

    @classmethod
    def call(
        cls,
        name: str,
        template: Template,
        view_paths: Sequence[ViewPath] | None = None,
        config: AnalysisConfig | None = None,
    ) -> list[str]:
        return cls(name, template, view_paths, config).dependencies()

    def dependencies(self) -> list[str]:
        """Virtual paths of rendered templates, then explicit ones."""
        rendered = [call.virtual_path for call in self.render_calls()]
        return rendered + explicit_dependencies(self._template.source, self._view_paths)

    def render_calls(self) -> list[RenderDependency]:
        """Dependency records, with locals, for the template's render calls."""
        code = self._template.compile()
        return RenderParser(self._name, code, self._config).render_calls()
