"""Configuration source tracking for CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core_types import JsonValue


class ConfigSource(StrEnum):
    """Source of a configuration value."""

    CLI = "cli"
    ENV = "env"
    CONFIG_FILE = "config_file"
    DEFAULT = "default"


@dataclass(frozen=True)
class ConfigValue:
    """Configuration value with source tracking.

    Parameters
    ----------
    key
        Configuration key name.
    value
        The resolved value.
    source
        Source of the value.
    location
        Optional additional detail (e.g., env var name, file path).
    """

    key: str
    value: JsonValue
    source: ConfigSource
    location: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary representation.

        Returns
        -------
        dict[str, object]
            Dictionary with value, source, and optional detail.
        """
        result: dict[str, object] = {
            "value": self.value,
            "source": self.source.value,
        }
        if self.location:
            result["location"] = self.location
        return result


@dataclass(frozen=True)
class ConfigWithSources:
    """Complete configuration with source tracking.

    Parameters
    ----------
    values
        Mapping of configuration keys to ConfigValue instances.
    """

    values: dict[str, ConfigValue]

    def to_display_dict(self) -> dict[str, dict[str, object]]:
        """Convert to display-ready dictionary representation.

        Returns
        -------
        dict[str, dict[str, object]]
            Nested dictionary with values and their sources.
        """
        return {key: cv.to_dict() for key, cv in self.values.items()}

    def to_flat_dict(self) -> dict[str, JsonValue]:
        """Get plain configuration values without source tracking.

        Returns
        -------
        dict[str, JsonValue]
            Plain key-value configuration dictionary.
        """
        return {key: cv.value for key, cv in self.values.items()}

    def get(self, key: str) -> JsonValue:
        """Return the value for ``key``, or None when it is not set."""
        entry = self.values.get(key)
        return None if entry is None else entry.value


def resolve_option(
    key: str,
    cli_value: JsonValue,
    *,
    config: ConfigWithSources | None = None,
    env_var: str | None = None,
    default: JsonValue = None,
) -> ConfigValue:
    """Resolve one option by precedence: CLI, environment, config file, default.

    Parameters
    ----------
    key
        Configuration key name.
    cli_value
        Value passed on the command line, or None when absent.
    config
        Effective configuration file values.
    env_var
        Environment variable consulted when no CLI value is given.
    default
        Value used when no other source sets the option.

    Returns
    -------
    ConfigValue
        Resolved value with its source.
    """
    if cli_value is not None:
        return ConfigValue(key=key, value=cli_value, source=ConfigSource.CLI)
    if env_var is not None:
        env_value = os.environ.get(env_var)
        if env_value:
            return ConfigValue(key=key, value=env_value, source=ConfigSource.ENV, location=env_var)
    if config is not None and key in config.values:
        return config.values[key]
    return ConfigValue(key=key, value=default, source=ConfigSource.DEFAULT)


__all__ = ["ConfigSource", "ConfigValue", "ConfigWithSources", "resolve_option"]
