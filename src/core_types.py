"""Type aliases shared by the model packages and the CLI."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

type PathLike = str | Path

# Values decoded from ``spine-model.toml`` or ``[tool.spine-model]``.
type JsonValue = str | int | float | bool | None | Mapping[str, JsonValue] | Sequence[JsonValue]


__all__ = ["JsonValue", "PathLike"]
