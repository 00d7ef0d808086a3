"""Configuration management commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.config_loader import CONFIG_FILENAME
from cli.context import RunContext
from cli.groups import admin_group
from cli.options import effective_config
from serde_msgspec import dumps_json_sorted

_TEMPLATE = """# spine-model.toml

# Directory holding .spine/spine_model.ser.
spine_dir_root = "."

# Decorator names marking command handler methods.
markers = ["assign"]

# Source roots scanned by `spine-model assemble`.
source_roots = ["src"]

# Locations recorded types are loaded from by `spine-model check`.
# When unset, the output directories of [[modules]] are used.
# classpath = ["src"]

# [[modules]]
# name = "app"
# output_dir = "src"
"""


def show_config(
    *,
    with_sources: Annotated[
        bool,
        Parameter(
            name="--with-sources",
            help="Show the source of each configuration value.",
        ),
    ] = False,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int:
    """Show the effective configuration payload.

    Returns:
    -------
    int
        Exit status code.
    """
    config = effective_config(run_context)
    payload = config.to_display_dict() if with_sources else config.to_flat_dict()
    sys.stdout.write(dumps_json_sorted(payload, pretty=True).decode("utf-8") + "\n")
    return 0


def init_config(
    *,
    path: Annotated[
        Path | None,
        Parameter(
            name="--path",
            help=f"Path to write the configuration template (default: {CONFIG_FILENAME}).",
        ),
    ] = None,
    force: Annotated[
        bool,
        Parameter(
            name="--force",
            help="Overwrite existing config file.",
            group=admin_group,
        ),
    ] = False,
) -> int:
    """Write a configuration template to disk.

    Returns:
    -------
    int
        Exit status code.

    Raises
    ------
    FileExistsError
        Raised when the target path exists and ``force`` is false.
    """
    target_path = path if path is not None else Path(CONFIG_FILENAME)
    if target_path.exists() and not force:
        msg = f"Config file already exists: {target_path}."
        raise FileExistsError(msg)
    target_path.write_text(_TEMPLATE, encoding="utf-8")
    return 0


__all__ = ["init_config", "show_config"]
