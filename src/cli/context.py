"""Invocation state handed from the launcher to each command."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core_types import JsonValue

if TYPE_CHECKING:
    from cli.config_source import ConfigWithSources


@dataclass(frozen=True)
class RunContext:
    """State resolved once by ``meta_launcher`` before a command runs.

    Commands receive it through their unparsed ``run_context`` parameter and
    fall back to loading the configuration themselves when it is ``None``.
    """

    log_level: str
    config_contents: Mapping[str, JsonValue] = field(default_factory=dict)
    config_sources: ConfigWithSources | None = None


__all__ = ["RunContext"]
