"""Config loading and normalization helpers for the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import cast

import msgspec

from cli.config_models import RootConfigSpec
from cli.config_source import ConfigSource, ConfigValue, ConfigWithSources
from core_types import JsonValue
from serde_msgspec import convert, to_builtins_sorted, validation_error_payload
from utils.file_io import read_toml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "spine-model.toml"
PYPROJECT_FILENAME = "pyproject.toml"
TOOL_KEY = "spine-model"


def load_effective_config(
    config_file: str | None,
    *,
    start: Path | None = None,
) -> dict[str, JsonValue]:
    """Load config contents from spine-model.toml / pyproject.toml or explicit --config.

    Parameters
    ----------
    config_file
        Optional explicit config file path.
    start
        Directory the parent search begins at; the current directory by default.

    Returns:
    -------
    dict[str, JsonValue]
        Parsed configuration contents; keys that are not set are omitted.
    """
    return load_effective_config_with_sources(config_file, start=start).to_flat_dict()


def load_effective_config_with_sources(
    config_file: str | None,
    *,
    start: Path | None = None,
) -> ConfigWithSources:
    """Load config contents with source tracking.

    The first source found wins: the explicit file, then ``spine-model.toml``
    in the start directory or a parent, then ``[tool.spine-model]`` in the
    nearest ``pyproject.toml``.

    Parameters
    ----------
    config_file
        Optional explicit config file path.
    start
        Directory the parent search begins at; the current directory by default.

    Returns:
    -------
    ConfigWithSources
        Configuration with source tracking for each value.

    Raises
    ------
    FileNotFoundError
        Raised when an explicit config file does not exist.
    """
    if config_file:
        path = Path(config_file)
        if not path.is_file():
            msg = f"Config file not found: {config_file!r}."
            raise FileNotFoundError(msg)
        raw, location = _resolve_explicit_payload(path)
        return _with_sources(_decode_root_config(raw, location=location), location=location)

    origin = start if start is not None else Path.cwd()
    config_path = _find_in_parents(CONFIG_FILENAME, origin)
    if config_path is not None:
        raw = read_toml(config_path)
        root = _decode_root_config(raw, location=str(config_path))
        return _with_sources(root, location=str(config_path))

    pyproject_path = _find_in_parents(PYPROJECT_FILENAME, origin)
    if pyproject_path is not None:
        nested = _extract_tool_config(read_toml(pyproject_path))
        if nested is not None:
            location = f"{pyproject_path}:tool.{TOOL_KEY}"
            return _with_sources(_decode_root_config(nested, location=location), location=location)

    logger.debug("No spine-model configuration found from %s.", origin)
    return ConfigWithSources(values={})


def _find_in_parents(filename: str, start: Path) -> Path | None:
    """Walk parents from ``start`` to find a filename.

    Returns:
    -------
    Path | None
        Path to the first matching file in the start directory or parents.
    """
    path = start.resolve()
    while True:
        candidate = path / filename
        if candidate.is_file():
            return candidate
        if path.parent == path:
            return None
        path = path.parent


def _with_sources(config: RootConfigSpec, *, location: str) -> ConfigWithSources:
    values = {
        key: ConfigValue(
            key=key,
            value=value,
            source=ConfigSource.CONFIG_FILE,
            location=location,
        )
        for key, value in _config_to_mapping(config).items()
    }
    return ConfigWithSources(values=values)


def _decode_root_config(raw: Mapping[str, object], *, location: str) -> RootConfigSpec:
    try:
        return convert(dict(raw), target_type=RootConfigSpec, strict=True)
    except msgspec.ValidationError as exc:
        details = validation_error_payload(exc)
        msg = f"Config validation failed for {location}: {details}"
        raise ValueError(msg) from exc


def _config_to_mapping(config: RootConfigSpec) -> dict[str, JsonValue]:
    payload = to_builtins_sorted(config, str_keys=True)
    return cast("dict[str, JsonValue]", payload)


def _resolve_explicit_payload(path: Path) -> tuple[Mapping[str, object], str]:
    raw = read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        nested = _extract_tool_config(raw)
        if nested is None:
            msg = f"Config validation failed for {path}: missing [tool.{TOOL_KEY}] section."
            raise ValueError(msg)
        return nested, f"{path}:tool.{TOOL_KEY}"
    return raw, str(path)


def _extract_tool_config(raw: Mapping[str, object]) -> dict[str, object] | None:
    tool_section = raw.get("tool")
    if not isinstance(tool_section, dict):
        return None
    nested = tool_section.get(TOOL_KEY)
    if not isinstance(nested, dict):
        return None
    return cast("dict[str, object]", nested)


__all__ = [
    "CONFIG_FILENAME",
    "load_effective_config",
    "load_effective_config_with_sources",
]
