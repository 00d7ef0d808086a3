"""Resolve recorded type names into descriptors through a type loader."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from model_assemble.facts import FactSet
from model_check.descriptors import ResolvedType
from model_check.loaders import TypeLoader

logger = logging.getLogger(__name__)

_CLASSPATH_HINT = (
    "Consider running the model check only for the modules with a sufficient classpath."
)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a fact set.

    Parameters
    ----------
    resolved
        Descriptors of the names that loaded, in canonical name order.
    unresolved
        Names the loader could not find, sorted.
    """

    resolved: tuple[ResolvedType, ...] = ()
    unresolved: tuple[str, ...] = ()


def unresolved_warning(names: Iterable[str]) -> str | None:
    """Return the single warning reported for unresolved names, if any.

    Returns
    -------
    str | None
        Warning text listing every name, or None when ``names`` is empty.
    """
    missing = sorted(names)
    if not missing:
        return None
    noun = "classes" if len(missing) > 1 else "the class"
    return f"Failed to load {noun} {', '.join(missing)}.\n{_CLASSPATH_HINT}"


class Resolver:
    """Turn fact-set names into resolved types.

    Names that do not resolve never fail the pass; they are reported in one
    aggregated warning and excluded from conflict checking.
    """

    def __init__(self, loader: TypeLoader) -> None:
        self._loader = loader

    def resolve(self, fact_set: FactSet, classpath: Sequence[Path] = ()) -> Resolution:
        """Load every name in ``fact_set`` against ``classpath``.

        Parameters
        ----------
        fact_set
            Recorded command-receiver names.
        classpath
            Ordered lookup locations handed to the loader.

        Returns
        -------
        Resolution
            Resolved descriptors and unresolved names.
        """
        resolved: list[ResolvedType] = []
        unresolved: list[str] = []
        for name in fact_set:
            loaded = self._loader.load(name, classpath)
            if loaded is None:
                unresolved.append(name)
            else:
                resolved.append(loaded)
        warning = unresolved_warning(unresolved)
        if warning is not None:
            logger.warning("%s", warning)
        return Resolution(resolved=tuple(resolved), unresolved=tuple(unresolved))


__all__ = ["Resolution", "Resolver", "unresolved_warning"]
