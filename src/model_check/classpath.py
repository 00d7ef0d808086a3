"""Classpath assembly from a project's module hierarchy."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from core_types import PathLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectModule:
    """A project module and the directory its processed sources land in."""

    name: str
    output_dir: Path | None = None
    submodules: tuple[ProjectModule, ...] = ()

    def walk(self) -> Iterator[ProjectModule]:
        """Yield this module and every submodule, depth first in declaration order."""
        yield self
        for submodule in self.submodules:
            yield from submodule.walk()


def destination_dir(module: ProjectModule) -> Path | None:
    """Return the absolute output directory of ``module``, or None when it has none."""
    if module.output_dir is None:
        return None
    return module.output_dir.expanduser().resolve()


def normalize_classpath(entries: Iterable[PathLike]) -> tuple[Path, ...]:
    """Resolve classpath entries to absolute paths, keeping the first occurrence of each.

    Returns
    -------
    tuple[Path, ...]
        Ordered, de-duplicated classpath.
    """
    seen: set[Path] = set()
    ordered: list[Path] = []
    for entry in entries:
        resolved = Path(entry).expanduser().resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        ordered.append(resolved)
    return tuple(ordered)


def assemble_classpath(root: ProjectModule) -> tuple[Path, ...]:
    """Collect output directories across the whole module hierarchy.

    Parameters
    ----------
    root
        Root module of the project.

    Returns
    -------
    tuple[Path, ...]
        Output directories in hierarchy order; modules without one are skipped.
    """
    dirs = [path for module in root.walk() if (path := destination_dir(module)) is not None]
    classpath = normalize_classpath(dirs)
    logger.debug("Assembled classpath for %s: %s.", root.name, [str(p) for p in classpath])
    return classpath


__all__ = [
    "ProjectModule",
    "assemble_classpath",
    "destination_dir",
    "normalize_classpath",
]
