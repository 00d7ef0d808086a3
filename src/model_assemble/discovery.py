"""Discover command-receiving types by scanning Python sources for marker decorators."""

from __future__ import annotations

import ast
import logging
import tokenize
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_MARKERS: tuple[str, ...] = ("assign",)

type FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


@dataclass(frozen=True)
class SourceUnit:
    """One Python module handed to marker discovery."""

    module: str
    text: str
    path: Path | None = None


class MarkerDiscovery(Protocol):
    """Capability returning the enclosing type name of every marked element."""

    def discover(self, units: Iterable[SourceUnit]) -> Iterator[str]:
        """Yield fully-qualified names of types declaring marked methods."""
        ...


def _decorator_name(node: ast.expr) -> str | None:
    target = node.func if isinstance(node, ast.Call) else node
    if isinstance(target, ast.Name):
        return target.id
    if isinstance(target, ast.Attribute):
        return target.attr
    return None


def is_marker_decorator(node: ast.expr, markers: Iterable[str]) -> bool:
    """Return True when a decorator expression applies one of ``markers``.

    ``@assign``, ``@commands.assign``, ``@assign(...)`` and
    ``@commands.assign(...)`` all match the marker ``assign``.
    """
    name = _decorator_name(node)
    return name is not None and name in set(markers)


def marker_methods(class_def: ast.ClassDef, markers: Iterable[str]) -> list[FunctionNode]:
    """Return the marked methods defined directly in a class body.

    Parameters
    ----------
    class_def
        Class definition to inspect.
    markers
        Decorator names identifying handler methods.

    Returns
    -------
    list[FunctionNode]
        Marked methods in source order.
    """
    wanted = tuple(markers)
    return [
        node
        for node in class_def.body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        and any(is_marker_decorator(deco, wanted) for deco in node.decorator_list)
    ]


def iter_class_defs(
    tree: ast.AST,
    *,
    prefix: str = "",
) -> Iterator[tuple[str, ast.ClassDef]]:
    """Yield ``(qualname, ClassDef)`` for every class reachable through class bodies.

    Classes nested inside functions are skipped; they have no stable
    qualified name.
    """
    yield from _iter_statements(getattr(tree, "body", []), prefix)


def _iter_statements(
    statements: list[ast.stmt],
    prefix: str,
) -> Iterator[tuple[str, ast.ClassDef]]:
    for node in statements:
        if isinstance(node, ast.ClassDef):
            qualname = f"{prefix}.{node.name}" if prefix else node.name
            yield qualname, node
            yield from _iter_statements(node.body, qualname)
        elif isinstance(node, (ast.If, ast.Try)):
            # Conditional definitions still live at the enclosing scope.
            for branch in _branch_bodies(node):
                yield from _iter_statements(branch, prefix)


def _branch_bodies(node: ast.If | ast.Try) -> Iterator[list[ast.stmt]]:
    yield node.body
    yield node.orelse
    if isinstance(node, ast.Try):
        for handler in node.handlers:
            yield handler.body
        yield node.finalbody


def _marked_functions_outside_classes(tree: ast.Module, markers: tuple[str, ...]) -> list[str]:
    return [
        node.name
        for node in tree.body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        and any(is_marker_decorator(deco, markers) for deco in node.decorator_list)
    ]


def parse_source(text: str | bytes, *, filename: str = "<unknown>") -> ast.Module | None:
    """Parse module text, returning None when it is not valid Python."""
    try:
        return ast.parse(text, filename=filename)
    except (SyntaxError, ValueError) as exc:
        logger.warning("Skipping %s: cannot parse source (%s).", filename, exc)
        return None


@dataclass(frozen=True)
class AstMarkerDiscovery:
    """Marker discovery backed by the standard library ``ast`` module."""

    markers: tuple[str, ...] = DEFAULT_MARKERS

    def discover(self, units: Iterable[SourceUnit]) -> Iterator[str]:
        """Yield the enclosing type name for each marked method in ``units``.

        Yields
        ------
        str
            Fully-qualified class names; a class with several marked
            methods is yielded once per method.
        """
        for unit in units:
            yield from self.discover_unit(unit)

    def discover_unit(self, unit: SourceUnit) -> list[str]:
        """Return the enclosing type names of marked methods in one module.

        Returns
        -------
        list[str]
            Fully-qualified class names in source order.
        """
        filename = str(unit.path) if unit.path is not None else unit.module
        tree = parse_source(unit.text, filename=filename)
        if tree is None:
            return []
        found: list[str] = []
        for qualname, class_def in iter_class_defs(tree):
            found.extend(
                f"{unit.module}.{qualname}" for _ in marker_methods(class_def, self.markers)
            )
        orphans = _marked_functions_outside_classes(tree, self.markers)
        if orphans:
            logger.debug(
                "Ignoring marked functions without an enclosing type in %s: %s.",
                unit.module,
                ", ".join(orphans),
            )
        return found


def module_name_for(path: Path, root: Path) -> str:
    """Return the dotted module name of ``path`` relative to a source root.

    Raises
    ------
    ValueError
        Raised when ``path`` is not a ``.py`` file under ``root``.
    """
    relative = path.relative_to(root)
    if relative.suffix != ".py":
        msg = f"Not a Python module: {path}."
        raise ValueError(msg)
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    if not parts:
        msg = f"Cannot derive a module name for {path} under {root}."
        raise ValueError(msg)
    return ".".join(parts)


def _is_skipped(relative: Path) -> bool:
    return any(part.startswith(".") or part == "__pycache__" for part in relative.parts[:-1])


def iter_source_units(roots: Iterable[Path]) -> Iterator[SourceUnit]:
    """Yield a ``SourceUnit`` for every Python module under the given roots.

    Files are visited in sorted order; hidden directories and
    ``__pycache__`` are skipped.
    """
    for root in roots:
        if not root.is_dir():
            logger.warning("Source root %s does not exist or is not a directory.", root)
            continue
        for path in sorted(root.rglob("*.py")):
            relative = path.relative_to(root)
            if _is_skipped(relative) or relative == Path("__init__.py"):
                continue
            try:
                with tokenize.open(path) as handle:
                    text = handle.read()
            except (SyntaxError, UnicodeDecodeError) as exc:
                logger.warning("Skipping %s: cannot decode source (%s).", path, exc)
                continue
            yield SourceUnit(module=module_name_for(path, root), text=text, path=path)


__all__ = [
    "DEFAULT_MARKERS",
    "AstMarkerDiscovery",
    "MarkerDiscovery",
    "SourceUnit",
    "is_marker_decorator",
    "iter_class_defs",
    "iter_source_units",
    "marker_methods",
    "module_name_for",
    "parse_source",
]
