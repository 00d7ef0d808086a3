"""Per-pass accumulation of discovered command receivers."""

from __future__ import annotations

from collections.abc import Iterable

from model_assemble.facts import FactSet


class Collector:
    """Accumulate type names discovered during one compilation pass.

    Recording the same name more than once has no observable effect.
    """

    def __init__(self) -> None:
        self._names: set[str] = set()

    def record(self, type_name: str) -> None:
        """Add a fully-qualified type name to the current pass.

        Parameters
        ----------
        type_name
            Name of a type declaring command-handling methods.

        Raises
        ------
        ValueError
            Raised when the name is empty or not a string.
        """
        if not isinstance(type_name, str) or not type_name.strip():
            msg = f"Expected a non-empty type name, got {type_name!r}."
            raise ValueError(msg)
        self._names.add(type_name)

    def record_all(self, type_names: Iterable[str]) -> None:
        """Record every name from an iterable."""
        for type_name in type_names:
            self.record(type_name)

    def finish(self) -> FactSet:
        """Return the names accumulated so far.

        Returns
        -------
        FactSet
            Fact set for this pass.
        """
        return FactSet.of(self._names)

    def __len__(self) -> int:
        return len(self._names)


__all__ = ["Collector"]
