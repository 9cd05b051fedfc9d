# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Compilation input for the generator.

A compilation is the ordered set of Python source modules one generation
pass looks at. Hosts build it from a directory tree or from in-memory
sources; the generator itself never touches the filesystem.
"""

from __future__ import annotations

import ast
import keyword
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from autoinject.errors import SourceRootError
from autoinject.generator.errors import SourceParseError
from autoinject.logging import get_logger

logger = get_logger(__name__)


def module_name_for(path: Path) -> str:
    """
    Derive a dotted module name from a path relative to the source root.

    ``pkg/sub/mod.py`` becomes ``pkg.sub.mod`` and ``pkg/__init__.py``
    becomes ``pkg``.
    """
    parts = list(path.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def is_importable(path: Path) -> bool:
    """
    Whether a relative source path can be imported as a module.

    Every directory and the file stem must be a non-keyword identifier, so
    ``my-app/mod.py``, ``01_intro/mod.py`` and ``pkg/foo.bar.py`` are not.
    """
    parts = (*path.parts[:-1], path.name.removesuffix(".py"))
    return all(
        part.isidentifier() and not keyword.iskeyword(part) for part in parts
    )


class SourceUnit:
    """One source module of a compilation."""

    def __init__(self, module: str, text: str, path: Path | None = None) -> None:
        self.module = module
        self.text = text
        self.path = path
        self._tree: ast.Module | None = None

    @property
    def is_package(self) -> bool:
        return self.path is not None and self.path.name == "__init__.py"

    @property
    def tree(self) -> ast.Module:
        """The parsed syntax tree.

        Raises:
            SourceParseError: If the source is not valid Python
        """
        if self._tree is None:
            filename = str(self.path) if self.path else f"<{self.module}>"
            try:
                self._tree = ast.parse(self.text, filename=filename)
            except SyntaxError as e:
                raise SourceParseError(
                    f"Cannot parse module '{self.module}': {e.msg}",
                    module=self.module,
                    filename=filename,
                    lineno=e.lineno,
                ) from e
        return self._tree

    def __repr__(self) -> str:
        return f"SourceUnit({self.module!r})"


class Compilation:
    """Ordered collection of source units."""

    def __init__(self, units: Iterable[SourceUnit]) -> None:
        self.units: list[SourceUnit] = list(units)
        self._by_module = {unit.module: unit for unit in self.units}

    def __iter__(self) -> Iterator[SourceUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def get(self, module: str) -> SourceUnit | None:
        return self._by_module.get(module)

    @classmethod
    def from_sources(
        cls, sources: Mapping[str, str], packages: Iterable[str] = ()
    ) -> Compilation:
        """
        Build a compilation from ``{module name: source text}`` pairs.

        Args:
            sources: Module sources in the order they should be scanned
            packages: Module names to treat as packages (``__init__`` modules)
                when resolving relative imports
        """
        package_names = set(packages)
        units = []
        for module, text in sources.items():
            path = None
            if module in package_names:
                path = Path(*module.split("."), "__init__.py")
            units.append(SourceUnit(module, text, path))
        return cls(units)

    @classmethod
    def from_directory(
        cls,
        root: str | Path,
        exclude_dirs: Iterable[str] = (),
        exclude_files: Iterable[str | Path] = (),
    ) -> Compilation:
        """
        Collect every ``*.py`` file below a source root.

        Files are ordered by relative path so repeated passes see the same
        order.

        Args:
            root: The source root; module names are relative to it
            exclude_dirs: Directory names to skip at any depth
            exclude_files: Files to leave out, such as a previously generated artifact

        Raises:
            SourceRootError: If the root is missing or not a directory
        """
        root = Path(root)
        if not root.is_dir():
            raise SourceRootError(
                f"Source root '{root}' is not a directory", root=str(root)
            )

        skipped_dirs = set(exclude_dirs)
        skipped_files = {Path(f).resolve() for f in exclude_files}
        units = []
        for path in sorted(root.rglob("*.py")):
            relative = path.relative_to(root)
            if any(part in skipped_dirs for part in relative.parts[:-1]):
                continue
            if path.resolve() in skipped_files:
                continue
            module = module_name_for(relative)
            if not module:
                continue
            if not is_importable(relative):
                logger.debug(
                    "Skipping file with no importable module name",
                    extra={"path": str(relative), "module": module},
                )
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise SourceRootError.wrap(
                    e,
                    message=f"Cannot read source file '{path}'",
                    context={"path": str(path)},
                ) from e
            units.append(SourceUnit(module, text, relative))

        logger.debug(
            "Collected source units", extra={"root": str(root), "units": len(units)}
        )
        return cls(units)
