"""Mutable dict-backed registry used for type lookups."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


@dataclass
class MutableRegistry[K, V]:
    """Mutable registry with dict storage and an explicit reset."""

    _entries: dict[K, V] = field(default_factory=dict)

    def register(self, key: K, value: V, *, overwrite: bool = False) -> None:
        """Register a value for the provided key.

        Parameters
        ----------
        key
            Key to register under.
        value
            Value to store.
        overwrite
            Whether an existing entry may be replaced.

        Raises
        ------
        ValueError
            Raised when the key is already registered and ``overwrite`` is false.
        """
        if key in self._entries and not overwrite:
            msg = f"Key {key!r} already registered. Use overwrite=True."
            raise ValueError(msg)
        self._entries[key] = value

    def get(self, key: K) -> V | None:
        """Retrieve a value by key, or ``None`` when missing."""
        return self._entries.get(key)

    def __contains__(self, key: K) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> Mapping[K, V]:
        """Return a detached copy of the current entries.

        Returns
        -------
        Mapping[K, V]
            Snapshot of registry entries.
        """
        return dict(self._entries)

    def clear(self) -> None:
        """Drop every registered entry."""
        self._entries.clear()


__all__ = ["MutableRegistry"]
