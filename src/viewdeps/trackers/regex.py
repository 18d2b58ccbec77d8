"""Text-heuristic dependency tracker.

For template formats whose code cannot be parsed. It scans the raw source
with regular expressions, so it is less precise than RenderTracker:

- partial names are not underscore-prefixed (``render "form"`` in
  ``messages/show`` yields ``messages/form``)
- option hashes are not interpreted; unknown options do not de-opt
- anything after ``render`` that looks like a name is taken as one

"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

import inflection

from viewdeps.analysis.explicit import explicit_dependencies

if TYPE_CHECKING:
    from viewdeps.environment.loaders import ViewPath
    from viewdeps.template import Template

# A valid Ruby identifier: a letter or underscore, then word characters
IDENTIFIER = r"[^\W\d]\w*"

# @instance, @@class, $global or local, possibly after a chain of zero-argument calls
VARIABLE_OR_METHOD_CHAIN = rf"(?:\$|@{{1,2}})?(?:{IDENTIFIER}\.)*(?P<dynamic>{IDENTIFIER})"

# A simple string literal: "School's out!"
STRING = r"(?P<quote>['\"])(?P<static>.*?)(?P=quote)"

# The :partial key in new or old hash syntax, and trailing spaces
PARTIAL_HASH_KEY = r"(?:\bpartial:|:partial\s*=>)\s*"

# The :layout key in new or old hash syntax, and trailing spaces
LAYOUT_HASH_KEY = r"(?:\blayout:|:layout\s*=>)\s*"

# Matches:
#   partial: "comments/comment", collection: @all_comments  => "comments/comment"
#   (object: @single_comment, partial: "comments/comment")  => "comments/comment"
#   "comments/comments" / 'comments/comments' / ('comments/comments')
#   (@topic) => "topics/topic"; topics => "topics/topic"; (message.topics) => "topics/topic"
RENDER_ARGUMENTS = re.compile(
    rf"\A(?:\s*\(?\s*)(?:.*?{PARTIAL_HASH_KEY}|{LAYOUT_HASH_KEY})?"
    rf"(?:{STRING}|{VARIABLE_OR_METHOD_CHAIN})",
    re.DOTALL,
)

LAYOUT_DEPENDENCY = re.compile(
    rf"\A(?:\s*\(?\s*)(?:.*?{LAYOUT_HASH_KEY})(?:{STRING}|{VARIABLE_OR_METHOD_CHAIN})",
    re.DOTALL,
)

_RENDER = re.compile(r"\brender\b")


class RegexTracker:
    """Find dependencies by scanning raw source text.

    Example:
        >>> RegexTracker.call("messages/show", template)
        ['messages/form', 'topics/topic']

    """

    supports_view_paths = True

    __slots__ = ("_name", "_template", "_view_paths")

    def __init__(
        self,
        name: str,
        template: Template,
        view_paths: Sequence[ViewPath] | None = None,
    ):
        self._name = name
        self._template = template
        self._view_paths = view_paths

    @classmethod
    def call(
        cls,
        name: str,
        template: Template,
        view_paths: Sequence[ViewPath] | None = None,
    ) -> list[str]:
        return cls(name, template, view_paths).dependencies()

    def dependencies(self) -> list[str]:
        found = self.render_dependencies() + explicit_dependencies(
            self._template.source, self._view_paths
        )
        return list(dict.fromkeys(found))

    def render_dependencies(self) -> list[str]:
        dependencies: list[str] = []
        for arguments in _RENDER.split(self._template.source)[1:]:
            self._add_dependencies(dependencies, arguments, LAYOUT_DEPENDENCY)
            self._add_dependencies(dependencies, arguments, RENDER_ARGUMENTS)
        return list(dict.fromkeys(dependencies))

    def _add_dependencies(
        self, dependencies: list[str], arguments: str, pattern: re.Pattern[str]
    ) -> None:
        match = pattern.match(arguments)
        if match is None:
            return
        dynamic = match.group("dynamic")
        if dynamic:
            dependencies.append(f"{inflection.pluralize(dynamic)}/{inflection.singularize(dynamic)}")
        static = match.group("static")
        if static is None:
            return
        if match.group("quote") == '"' and "#{" in static:
            return
        directory = self._directory()
        if "/" in static or not directory:
            dependencies.append(static)
        else:
            dependencies.append(f"{directory}/{static}")

    def _directory(self) -> str:
        return self._name.rpartition("/")[0]
