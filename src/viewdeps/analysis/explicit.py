"""Explicit dependency annotations.

Templates can declare dependencies that static analysis cannot see::

    <%# Template Dependency: shared/header %>
    <%# Template Dependency: shared/* %>

A token ending in ``/*`` is a directory wildcard, expanded to every
template whose directory equals the part before ``/*``. Annotations are
read from the raw template source, not from compiled code.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from viewdeps.environment.loaders import ViewPath

logger = logging.getLogger(__name__)

EXPLICIT_DEPENDENCY = re.compile(r"# Template Dependency: (\S+)")


def explicit_dependencies(
    source: str, view_paths: Iterable[ViewPath] | None = None
) -> list[str]:
    """Virtual paths declared by annotations in ``source``.

    Expanded wildcards come first (sorted), then plain tokens in
    first-seen order, without duplicates. Without ``view_paths`` a
    wildcard expands to nothing.

    Example:
        >>> explicit_dependencies("# Template Dependency: shared/header")
        ['shared/header']

    """
    tokens = list(dict.fromkeys(EXPLICIT_DEPENDENCY.findall(source)))
    wildcards = [token for token in tokens if token.endswith("/*")]
    explicits = [token for token in tokens if not token.endswith("/*")]
    return list(dict.fromkeys(resolve_directories(wildcards, view_paths) + explicits))


def resolve_directories(
    wildcards: Iterable[str], view_paths: Iterable[ViewPath] | None
) -> list[str]:
    """Expand ``dir/*`` tokens to the sorted templates listed under ``dir``."""
    prefixes = {wildcard[:-2] for wildcard in wildcards}
    if not prefixes:
        return []
    if view_paths is None:
        logger.debug("No view paths to expand %s", ", ".join(sorted(prefixes)))
        return []

    paths = dict.fromkeys(
        template_path for view_path in view_paths for template_path in view_path.all_template_paths()
    )
    return sorted(str(path) for path in paths if path.prefix in prefixes)
