"""Type-loading capabilities used to resolve recorded names into descriptors.

Loaders return ``None`` for names they cannot find; they never raise for a
missing type so the resolver can aggregate every miss into one report.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from model_assemble.discovery import (
    DEFAULT_MARKERS,
    FunctionNode,
    iter_class_defs,
    marker_methods,
    parse_source,
)
from model_check.descriptors import HandlerMethod, ResolvedType
from utils.registry import MutableRegistry

logger = logging.getLogger(__name__)


class TypeLoader(Protocol):
    """Capability resolving a fully-qualified name against a classpath."""

    def load(self, name: str, classpath: Sequence[Path]) -> ResolvedType | None:
        """Return the resolved type, or ``None`` when it cannot be found."""
        ...


@dataclass
class TypeRegistry:
    """Explicit, bounded-lifetime registry of known types.

    The classpath is ignored: every registered type is visible. ``reset``
    drops all registered types, which keeps tests isolated from each other.
    """

    _types: MutableRegistry[str, ResolvedType] = field(default_factory=MutableRegistry)

    def register(self, resolved: ResolvedType, *, overwrite: bool = False) -> None:
        """Register a resolved type under its name."""
        self._types.register(resolved.name, resolved, overwrite=overwrite)

    def declare(self, name: str, *handlers: tuple[str, str | None]) -> ResolvedType:
        """Register a type from ``(method, message_kind)`` pairs.

        Returns
        -------
        ResolvedType
            The registered descriptor.
        """
        resolved = ResolvedType(
            name=name,
            handlers=tuple(HandlerMethod(name=method, message_kind=kind) for method, kind in handlers),
        )
        self.register(resolved)
        return resolved

    def load(self, name: str, classpath: Sequence[Path] = ()) -> ResolvedType | None:
        """Return the registered type named ``name``."""
        _ = classpath
        return self._types.get(name)

    def reset(self) -> None:
        """Drop all registered types."""
        self._types.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


def _candidate_splits(name: str) -> list[tuple[str, str]]:
    parts = name.split(".")
    return [(".".join(parts[:idx]), ".".join(parts[idx:])) for idx in range(len(parts) - 1, 0, -1)]


def _find_module_file(module: str, classpath: Sequence[Path]) -> tuple[Path, bool] | None:
    relative = Path(*module.split("."))
    for entry in classpath:
        module_file = entry / relative.with_suffix(".py")
        if module_file.is_file():
            return module_file, False
        package_init = entry / relative / "__init__.py"
        if package_init.is_file():
            return package_init, True
    return None


def _find_class(tree: ast.Module, qualname: str) -> ast.ClassDef | None:
    for candidate, class_def in iter_class_defs(tree):
        if candidate == qualname:
            return class_def
    return None


def _relative_base(module: str, level: int, *, is_package: bool) -> list[str]:
    parts = module.split(".")
    if not is_package:
        parts = parts[:-1]
    drop = level - 1
    if drop > 0:
        parts = parts[:-drop] if drop < len(parts) else []
    return parts


def import_aliases(tree: ast.Module, module: str, *, is_package: bool = False) -> dict[str, str]:
    """Map names bound by module-level imports to the dotted names they refer to.

    Parameters
    ----------
    tree
        Parsed module.
    module
        Dotted name of the module, used to resolve relative imports.
    is_package
        Whether the module is a package ``__init__``.

    Returns
    -------
    dict[str, str]
        Local name to fully-qualified name.
    """
    aliases: dict[str, str] = {}
    for node in tree.body:
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname is not None:
                    aliases[alias.asname] = alias.name
                else:
                    head = alias.name.split(".", 1)[0]
                    aliases[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = (
                _relative_base(module, node.level, is_package=is_package) if node.level else []
            )
            if node.module:
                base = [*base, *node.module.split(".")]
            for alias in node.names:
                if alias.name == "*":
                    continue
                aliases[alias.asname or alias.name] = ".".join([*base, alias.name])
    return aliases


def _dotted_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        owner = _dotted_name(node.value)
        return f"{owner}.{node.attr}" if owner is not None else None
    return None


def _annotation_expr(annotation: ast.expr) -> ast.expr:
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        try:
            return ast.parse(annotation.value, mode="eval").body
        except SyntaxError:
            return annotation
    return annotation


def _message_parameter(function: FunctionNode) -> ast.arg | None:
    positional = [*function.args.posonlyargs, *function.args.args]
    is_static = any(
        isinstance(deco, ast.Name) and deco.id == "staticmethod"
        for deco in function.decorator_list
    )
    params = positional if is_static else positional[1:]
    return params[0] if params else None


@dataclass(frozen=True)
class ModuleScope:
    """Names visible at module level, used to qualify annotations."""

    module: str
    aliases: Mapping[str, str]
    classes: frozenset[str]

    def qualify(self, dotted: str) -> str:
        head, _, rest = dotted.partition(".")
        if head in self.aliases:
            target = self.aliases[head]
            return f"{target}.{rest}" if rest else target
        if head in self.classes:
            return f"{self.module}.{dotted}"
        return dotted


def message_kind_of(function: FunctionNode, scope: ModuleScope) -> str | None:
    """Return the message kind a handler method accepts, or ``None``.

    The kind is the annotation of the first parameter after ``self``,
    qualified through the module's imports and class definitions.
    """
    param = _message_parameter(function)
    if param is None or param.annotation is None:
        return None
    expr = _annotation_expr(param.annotation)
    dotted = _dotted_name(expr)
    if dotted is None:
        return ast.unparse(expr)
    return scope.qualify(dotted)


@dataclass(frozen=True)
class SourceTypeLoader:
    """Resolve types by statically reading modules found on the classpath.

    The first classpath entry holding the module wins. Nothing is imported
    or executed.

    Message kinds are qualified by the import path written in the handler's
    module, not by the module defining the class. A kind imported through a
    package re-export (``from shop import Ping``) qualifies to ``shop.Ping``
    while the same class imported from ``shop.commands`` qualifies to
    ``shop.commands.Ping``, so two handlers reaching one class through
    different paths are not reported as duplicates.
    """

    markers: tuple[str, ...] = DEFAULT_MARKERS

    def load(self, name: str, classpath: Sequence[Path]) -> ResolvedType | None:
        """Return the descriptor of ``name``, or ``None`` when it is not on the classpath.

        Returns
        -------
        ResolvedType | None
            Resolved type with its marked methods.
        """
        for module, qualname in _candidate_splits(name):
            located = _find_module_file(module, classpath)
            if located is None:
                continue
            module_file, is_package = located
            tree = self._parse(module_file)
            if tree is None:
                continue
            class_def = _find_class(tree, qualname)
            if class_def is None:
                continue
            scope = ModuleScope(
                module=module,
                aliases=import_aliases(tree, module, is_package=is_package),
                classes=frozenset(
                    qualified for qualified, _ in iter_class_defs(tree) if "." not in qualified
                ),
            )
            handlers = tuple(
                HandlerMethod(name=method.name, message_kind=message_kind_of(method, scope))
                for method in marker_methods(class_def, self.markers)
            )
            return ResolvedType(name=name, handlers=handlers)
        logger.debug("Type %s not found on classpath %s.", name, list(classpath))
        return None

    @staticmethod
    def _parse(module_file: Path) -> ast.Module | None:
        try:
            source = module_file.read_bytes()
        except OSError as exc:
            logger.debug("Cannot read %s: %s.", module_file, exc)
            return None
        return parse_source(source, filename=str(module_file))


__all__ = [
    "ModuleScope",
    "SourceTypeLoader",
    "TypeLoader",
    "TypeRegistry",
    "import_aliases",
    "message_kind_of",
]
