"""Render-call resolution.

Turns the render and layout calls of one template into dependency records
without executing anything. Every step returns either a value or an
``Unresolvable`` carrying the reason; an unresolvable call contributes no
dependencies at all, never a partial answer.

Pipeline::

    code -> parse -> CallSiteCollector -> normalize -> resolve -> [RenderDependency]

Example:
    >>> parser = RenderParser("messages/show", "render partial: 'form', locals: {message: @m}")
    >>> parser.render_calls()
    [RenderDependency(virtual_path='messages/_form', locals_keys=('message',))]

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import inflection

from viewdeps.analysis.calls import CallKind, RenderInvocation, extract_render_calls
from viewdeps.analysis.config import DEFAULT_CONFIG, AnalysisConfig
from viewdeps.nodes import (
    Hash,
    Program,
    hash_pairs,
    reference_name,
    string_value,
    symbol_name,
)
from viewdeps.parser import Parser

if TYPE_CHECKING:
    from viewdeps.nodes import Node

logger = logging.getLogger(__name__)

# Option keys a render call may use; any other key de-opts the call
KNOWN_OPTIONS = frozenset(
    {
        "partial",
        "template",
        "layout",
        "formats",
        "locals",
        "object",
        "collection",
        "as",
        "status",
        "content_type",
        "location",
        "spacer_template",
    }
)

_CONTROLLER_RENDER_TYPES = ("partial", "template")
_VIEW_RENDER_TYPES = ("partial", "template", "layout")

# Last path segment, for the underscore partial prefix
_LAST_SEGMENT = re.compile(r"(/|^)([^/]*)\Z")
_DIRECTORY_AND_NAME = re.compile(r"(.*)/([^/]*)\Z")
# "_post.html.erb" -> "post"
_LOCAL_NAME = re.compile(r"_?(.*?)(?:\.\w+)*\Z")

Options = dict[str, "Node"]


@dataclass(frozen=True, slots=True)
class RenderDependency:
    """A template a render call depends on.

    Attributes:
        virtual_path: Handler-agnostic template name, e.g. "messages/_form"
        locals_keys: Local variable names the template receives, in order
    """

    virtual_path: str
    locals_keys: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.virtual_path


@dataclass(frozen=True, slots=True)
class Unresolvable:
    """A render call the analyzer declines to interpret."""

    reason: str


def partial_to_virtual_path(render_type: str, path: str) -> str:
    """Prefix the last path segment with ``_`` for partials and layouts.

    >>> partial_to_virtual_path("partial", "messages/form")
    'messages/_form'
    >>> partial_to_virtual_path("template", "messages/form")
    'messages/form'
    """
    if render_type in ("partial", "layout"):
        return _LAST_SEGMENT.sub(r"\1_\2", path, count=1)
    return path


def layout_to_virtual_path(path: str) -> str:
    return f"layouts/{path}"


class RenderParser:
    """Resolve the render calls of one template.

    Args:
        name: Virtual path of the template being analyzed. Its directory
            anchors relative partial names in view mode.
        code: Compiled template code, or an already parsed Program
        config: Analysis settings; ``from_controller`` selects controller mode

    Thread-safe: Instances hold no mutable state after construction.

    """

    def __init__(
        self,
        name: str,
        code: str | Program,
        config: AnalysisConfig | None = None,
    ) -> None:
        self._name = name
        self._code = code
        self._config = config or DEFAULT_CONFIG

    @property
    def from_controller(self) -> bool:
        return self._config.from_controller

    def render_calls(self) -> list[RenderDependency]:
        """Dependencies of every resolvable call, in call order."""
        calls = extract_render_calls(self._parse(), self._config)
        dependencies: list[RenderDependency] = []
        for kind, invocations in calls.items():
            for invocation in invocations:
                if kind is CallKind.LAYOUT:
                    outcome = self.parse_layout(invocation)
                else:
                    outcome = self.parse_render(invocation)
                if isinstance(outcome, Unresolvable):
                    logger.debug(
                        "Skipping %s call at %s:%d: %s",
                        invocation.method,
                        self._name,
                        invocation.lineno,
                        outcome.reason,
                    )
                    continue
                dependencies.extend(outcome)
        return dependencies

    def parse_render(self, invocation: RenderInvocation) -> list[RenderDependency] | Unresolvable:
        options = self.normalize(invocation)
        if isinstance(options, Unresolvable):
            return options
        return self.resolve(options)

    def parse_layout(self, invocation: RenderInvocation) -> list[RenderDependency] | Unresolvable:
        """Resolve ``layout "name"`` (controller mode only)."""
        if not self.from_controller:
            return Unresolvable("layout declarations are only resolved in controllers")
        if not invocation.arguments:
            return Unresolvable("layout without arguments")
        template = string_value(invocation.arguments[0])
        if template is None:
            return Unresolvable("layout name is not a string literal")
        return [RenderDependency(layout_to_virtual_path(template))]

    # ─────────────────────────────────────────────────────────────────────────
    # Normalization
    # ─────────────────────────────────────────────────────────────────────────

    def normalize(self, invocation: RenderInvocation) -> Options | Unresolvable:
        """Rewrite the call's arguments as an option mapping.

        ``render "x"``, ``render "x", a: 1`` and ``render partial: "x"``
        all become a mapping keyed by option name. In a view, a bare
        subject is the partial and a second hash its locals; in a
        controller, the subject is the template and the hash holds options.
        """
        args = invocation.arguments

        if len(args) == 1 and isinstance(args[0], Hash):
            return self._options_from_hash(args[0])

        if len(args) in (1, 2) and not isinstance(args[0], Hash):
            subject = args[0]
            options_node = args[1] if len(args) == 2 else None

            if self.from_controller:
                if options_node is None:
                    options: Options = {}
                else:
                    parsed = self._options_from_hash(options_node)
                    if isinstance(parsed, Unresolvable):
                        return parsed
                    options = parsed
                options["template"] = subject
                return options

            if options_node is None:
                return {"partial": subject}
            return {"partial": subject, "locals": options_node}

        return Unresolvable(f"unsupported argument shape ({len(args)} arguments)")

    def _options_from_hash(self, node: Node) -> Options | Unresolvable:
        pairs = hash_pairs(node)
        if pairs is None:
            return Unresolvable("options are not a hash literal")
        options: Options = {}
        for key, value in pairs:
            name = symbol_name(key)
            if name is None:
                return Unresolvable("option key is not a symbol")
            options[name] = value
        return options

    # ─────────────────────────────────────────────────────────────────────────
    # Resolution
    # ─────────────────────────────────────────────────────────────────────────

    def resolve(self, options: Options) -> list[RenderDependency] | Unresolvable:
        """Resolve an option mapping to at most three dependencies.

        Emits, in order: the spacer template (if any), the rendered
        partial or template, and its layout (if any).
        """
        render_types = _CONTROLLER_RENDER_TYPES if self.from_controller else _VIEW_RENDER_TYPES
        # First by priority, not by position in the call
        render_type = next((key for key in render_types if key in options), None)
        if render_type is None:
            return Unresolvable("no partial, template or layout option")

        unknown = [key for key in options if key not in KNOWN_OPTIONS]
        if unknown:
            return Unresolvable(f"unknown option {unknown[0]!r}")

        resolved = self._resolve_template(options[render_type])
        if isinstance(resolved, Unresolvable):
            return resolved
        template, object_template = resolved

        locals_keys = self._locals_keys(options)
        if isinstance(locals_keys, Unresolvable):
            return locals_keys

        dependencies: list[RenderDependency] = []

        spacer = self._spacer_template(options)
        if spacer is not None:
            # Collection locals below do not apply to the spacer
            dependencies.append(
                RenderDependency(
                    partial_to_virtual_path("partial", spacer), tuple(dict.fromkeys(locals_keys))
                )
            )

        if "object" in options or "collection" in options or object_template:
            if "object" in options and "collection" in options:
                return Unresolvable("object and collection are mutually exclusive")
            if render_type != "partial":
                return Unresolvable("object and collection renders require a partial")
            local_name = self._local_name(options, template)
            if isinstance(local_name, Unresolvable):
                return local_name
            locals_keys.append(local_name)
            if "collection" in options:
                locals_keys.append(f"{local_name}_counter")
                locals_keys.append(f"{local_name}_iteration")

        keys = tuple(dict.fromkeys(locals_keys))
        dependencies.append(RenderDependency(partial_to_virtual_path(render_type, template), keys))

        layout = self._layout_path(render_type, template, options)
        if layout is not None:
            dependencies.append(RenderDependency(layout, keys))

        return dependencies

    def _resolve_template(self, node: Node) -> tuple[str, bool] | Unresolvable:
        """Template path for the render-type option, and whether it was
        inferred from an object."""
        text = string_value(node)
        if text is not None:
            if self.from_controller:
                return text, False
            return self._resolve_path_directory(text), False

        name = reference_name(node)
        if name:
            return f"{inflection.pluralize(name)}/{inflection.singularize(name)}", True

        return Unresolvable(f"cannot infer a template from {type(node).__name__}")

    def _resolve_path_directory(self, path: str) -> str:
        if "/" in path:
            return path
        directory = self._directory()
        if not directory:
            return path
        return f"{directory}/{path}"

    def _directory(self) -> str:
        return self._name.rpartition("/")[0]

    def _locals_keys(self, options: Options) -> list[str] | Unresolvable:
        if "locals" not in options:
            return []
        pairs = hash_pairs(options["locals"])
        if pairs is None:
            return Unresolvable("locals is not a hash literal")
        keys: list[str] = []
        for key, _value in pairs:
            name = symbol_name(key)
            if name is None:
                return Unresolvable("locals key is not a symbol")
            keys.append(name)
        return keys

    def _spacer_template(self, options: Options) -> str | None:
        if self.from_controller or "spacer_template" not in options:
            return None
        return string_value(options["spacer_template"])

    def _local_name(self, options: Options, template: str) -> str | Unresolvable:
        if "as" in options:
            node = options["as"]
            name = string_value(node) or symbol_name(node)
        else:
            basename = template.rpartition("/")[2]
            match = _LOCAL_NAME.match(basename)
            name = match.group(1) if match else None
        if not name:
            return Unresolvable("cannot determine the local variable name")
        return name

    def _layout_path(self, render_type: str, template: str, options: Options) -> str | None:
        if render_type == "layout" or "layout" not in options:
            return None
        layout = string_value(options["layout"])
        if layout is None:
            return None
        if self.from_controller:
            return layout_to_virtual_path(layout)
        if "/" not in layout:
            match = _DIRECTORY_AND_NAME.match(template)
            if match:
                layout = f"{match.group(1)}/{layout}"
        return partial_to_virtual_path("layout", layout)

    def _parse(self) -> Program:
        if isinstance(self._code, Program):
            return self._code
        parser = Parser(self._code, self._name)
        program = parser.parse()
        if parser.errors:
            logger.debug("%s: recovered from %d syntax error(s)", self._name, len(parser.errors))
        return program
