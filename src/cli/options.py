"""Effective option resolution shared by the CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from cli.config_loader import load_effective_config_with_sources
from cli.config_source import ConfigWithSources, resolve_option
from cli.context import RunContext
from cli.path_utils import resolve_path, resolve_paths, string_items
from model_assemble.discovery import DEFAULT_MARKERS
from model_assemble.store import DEFAULT_SPINE_DIR_ROOT
from model_check.classpath import ProjectModule, assemble_classpath

logger = logging.getLogger(__name__)

SPINE_DIR_ROOT_ENV = "SPINE_DIR_ROOT"


def effective_config(run_context: RunContext | None) -> ConfigWithSources:
    """Return the configuration resolved by the launcher, loading it when absent.

    Returns
    -------
    ConfigWithSources
        Configuration values with their sources.
    """
    if run_context is not None and run_context.config_sources is not None:
        return run_context.config_sources
    return load_effective_config_with_sources(None)


@dataclass(frozen=True)
class ProjectOptions:
    """Options every model command resolves before running."""

    config: ConfigWithSources
    base: Path

    @classmethod
    def from_context(cls, run_context: RunContext | None) -> ProjectOptions:
        """Resolve the effective configuration relative to the current directory.

        Returns
        -------
        ProjectOptions
            Options bound to the effective configuration.
        """
        return cls(config=effective_config(run_context), base=Path.cwd())

    def spine_dir_root(self, cli_value: Path | None) -> Path:
        """Return the model store root: flag, ``SPINE_DIR_ROOT``, config, then ``.``."""
        resolved = resolve_option(
            "spine_dir_root",
            None if cli_value is None else str(cli_value),
            config=self.config,
            env_var=SPINE_DIR_ROOT_ENV,
            default=DEFAULT_SPINE_DIR_ROOT,
        )
        logger.debug("spine_dir_root=%s (from %s).", resolved.value, resolved.source)
        return resolve_paths(self.base, [str(resolved.value)])[0]

    def markers(self, cli_value: list[str] | None) -> tuple[str, ...]:
        """Return the handler marker names: flags, config, then the default marker."""
        if cli_value:
            return tuple(cli_value)
        return string_items(self.config.get("markers")) or DEFAULT_MARKERS

    def source_roots(self, cli_value: tuple[Path, ...], spine_dir_root: Path) -> tuple[Path, ...]:
        """Return the directories scanned for handlers: arguments, config, then the store root."""
        if cli_value:
            return resolve_paths(self.base, cli_value)
        configured = string_items(self.config.get("source_roots"))
        if configured:
            return resolve_paths(self.base, configured)
        return (spine_dir_root,)

    def project_module(self) -> ProjectModule | None:
        """Return the configured module hierarchy, or None when no modules are configured.

        Raises
        ------
        TypeError
            Raised when the configured ``modules`` value is malformed.
        """
        modules = self.config.get("modules")
        if modules is None:
            return None
        if not isinstance(modules, list):
            msg = f"Expected a list of modules, got {modules!r}."
            raise TypeError(msg)
        submodules: list[ProjectModule] = []
        for entry in modules:
            if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                msg = f"Expected a module table with a name, got {entry!r}."
                raise TypeError(msg)
            output_dir = entry.get("output_dir")
            submodules.append(
                ProjectModule(
                    name=str(entry["name"]),
                    output_dir=resolve_path(self.base, output_dir)
                    if isinstance(output_dir, str)
                    else None,
                ),
            )
        return ProjectModule(name=self.base.name or "root", submodules=tuple(submodules))

    def classpath(self, cli_value: list[Path] | None, spine_dir_root: Path) -> tuple[Path, ...]:
        """Return the classpath: flags, config, the module hierarchy, then the store root."""
        if cli_value:
            return resolve_paths(self.base, cli_value)
        configured = string_items(self.config.get("classpath"))
        if configured:
            return resolve_paths(self.base, configured)
        project = self.project_module()
        if project is not None:
            assembled = assemble_classpath(project)
            if assembled:
                return assembled
        return (spine_dir_root,)


__all__ = ["SPINE_DIR_ROOT_ENV", "ProjectOptions", "effective_config"]
