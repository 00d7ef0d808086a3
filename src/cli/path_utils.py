"""Path helper utilities for CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from core_types import JsonValue


def resolve_path(base: Path, value: Path | str | None) -> Path | None:
    """Resolve a path relative to ``base`` when needed.

    Parameters
    ----------
    base
        Directory relative paths are anchored at.
    value
        Input path or string.

    Returns:
    -------
    Path | None
        Resolved path or None when input is None.
    """
    if value is None:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def resolve_paths(base: Path, values: Iterable[Path | str]) -> tuple[Path, ...]:
    """Resolve each of ``values`` against ``base``, keeping their order."""
    return tuple(base / Path(value).expanduser() for value in values)


def string_items(value: JsonValue) -> tuple[str, ...]:
    """Return a configured list of strings, or an empty tuple when unset.

    Raises
    ------
    TypeError
        Raised when ``value`` is neither None nor a list of strings.
    """
    if value is None:
        return ()
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    msg = f"Expected a list of strings, got {value!r}."
    raise TypeError(msg)


__all__ = ["resolve_path", "resolve_paths", "string_items"]
