"""View paths for wildcard dependency expansion.

A view path lists the templates it can serve. Wildcard annotations
(``# Template Dependency: shared/*``) are expanded against that listing.

Built-in View Paths:
- `DictViewPath`: In-memory listing (testing/embedded)
- `FileSystemViewPath`: Walk one or more template directories

Custom View Paths:
Implement the ViewPath protocol:
    ```python
    class DatabaseViewPath:
        def all_template_paths(self) -> list[TemplatePath]:
            rows = db.query("SELECT virtual_path FROM templates ORDER BY 1")
            return [TemplatePath.parse(r.virtual_path) for r in rows]
    ```

Thread-Safety:
``all_template_paths()`` may be called concurrently. DictViewPath holds an
immutable tuple; FileSystemViewPath walks the directories on every call.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True, slots=True, order=True)
class TemplatePath:
    """A template known to a view path.

    Attributes:
        virtual_path: Handler-agnostic name, e.g. "shared/_header"
        prefix: Directory part, e.g. "shared" ("" at the root)
        name: Final segment, e.g. "_header"

    Example:
        >>> TemplatePath.parse("shared/_header")
        TemplatePath(virtual_path='shared/_header', prefix='shared', name='_header')

    """

    virtual_path: str
    prefix: str
    name: str

    @classmethod
    def parse(cls, virtual_path: str) -> TemplatePath:
        prefix, _, name = virtual_path.rpartition("/")
        return cls(virtual_path, prefix, name)

    def __str__(self) -> str:
        return self.virtual_path


class ViewPath(Protocol):
    """Anything that can list its templates."""

    def all_template_paths(self) -> Iterable[TemplatePath]: ...


class DictViewPath:
    """List templates from in-memory virtual path strings.

    Example:
        >>> view_path = DictViewPath(["shared/_header", "shared/_footer"])
        >>> [str(p) for p in view_path.all_template_paths()]
        ['shared/_footer', 'shared/_header']

    """

    __slots__ = ("_paths",)

    def __init__(self, names: Iterable[str]):
        self._paths = tuple(sorted({TemplatePath.parse(name) for name in names}))

    def all_template_paths(self) -> list[TemplatePath]:
        return list(self._paths)


class FileSystemViewPath:
    """List templates found under one or more directories.

    File names are reduced to virtual paths by dropping every extension,
    so ``shared/_header.html.erb`` is listed as ``shared/_header``.

    Attributes:
        _paths: Directories to walk
        _extensions: Last extensions to accept (e.g. {"erb"}); None accepts all

    Example:
        >>> view_path = FileSystemViewPath("app/views", extensions=["erb"])
        >>> [str(p) for p in view_path.all_template_paths()]
        ['layouts/application', 'messages/_form', 'messages/show']

    """

    __slots__ = ("_extensions", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        extensions: Iterable[str] | None = None,
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._extensions = (
            frozenset(ext.lstrip(".") for ext in extensions) if extensions is not None else None
        )

    def all_template_paths(self) -> list[TemplatePath]:
        """List all templates in the search paths, sorted."""
        templates: set[TemplatePath] = set()
        for base in self._paths:
            if not base.is_dir():
                continue
            for path in base.rglob("*"):
                if not path.is_file() or not self._accepts(path):
                    continue
                relative = path.relative_to(base)
                stem = relative.name.split(".", 1)[0]
                if not stem:
                    continue
                virtual_path = (relative.parent / stem).as_posix()
                templates.add(TemplatePath.parse(virtual_path))
        return sorted(templates)

    def _accepts(self, path: Path) -> bool:
        if self._extensions is None:
            return True
        return path.suffix.lstrip(".") in self._extensions
