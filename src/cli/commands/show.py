"""Print the persisted command handler model."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.groups import store_group
from cli.options import ProjectOptions
from cli.result import CliResult
from model_assemble import ModelStore
from model_errors import ModelError
from serde_msgspec import dumps_json_sorted


def show_command(
    *,
    spine_dir_root: Annotated[
        Path | None,
        Parameter(
            name="--spine-dir-root",
            help="Directory holding .spine/spine_model.ser (env: SPINE_DIR_ROOT).",
            group=store_group,
        ),
    ] = None,
    as_json: Annotated[
        bool,
        Parameter(name="--json", help="Print the model as JSON."),
    ] = False,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> CliResult | int:
    """Show the command receivers recorded in the model store.

    Returns
    -------
    CliResult | int
        Listing of recorded types, or the store error with its exit code.
    """
    options = ProjectOptions.from_context(run_context)
    store = ModelStore.for_root(options.spine_dir_root(spine_dir_root))
    try:
        fact_set = store.read()
    except ModelError as exc:
        return CliResult.from_exception(exc)
    if as_json:
        payload = {
            "store": str(store.path),
            "exists": store.exists(),
            "command_receiving_type": fact_set.sorted_names(),
        }
        sys.stdout.write(dumps_json_sorted(payload, pretty=True).decode("utf-8") + "\n")
        return 0
    if not store.exists():
        return CliResult.success(summary=f"No model definition found under `{store.path}`.")
    lines = [f"{len(fact_set)} command receivers in {store.path}:"]
    lines.extend(f"  {name}" for name in fact_set)
    return CliResult.success(summary="\n".join(lines))


__all__ = ["show_command"]
