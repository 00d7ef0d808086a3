"""Typed configuration models for spine-model."""

from __future__ import annotations

from serde_msgspec import StructBaseStrict


class ModuleConfig(StructBaseStrict, frozen=True):
    """One project module and the directory its processed sources land in."""

    name: str
    output_dir: str | None = None


class RootConfigSpec(StructBaseStrict, frozen=True):
    """Root configuration payload for spine-model."""

    spine_dir_root: str | None = None
    markers: tuple[str, ...] | None = None
    source_roots: tuple[str, ...] | None = None
    classpath: tuple[str, ...] | None = None
    modules: tuple[ModuleConfig, ...] | None = None
    log_level: str | None = None


__all__ = ["ModuleConfig", "RootConfigSpec"]
