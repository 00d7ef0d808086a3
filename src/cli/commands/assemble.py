"""Aggregation pass command: record command receivers into the model store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.groups import discovery_group, store_group
from cli.options import ProjectOptions
from cli.result import CliResult
from model_assemble import AstMarkerDiscovery, ModelStore, assemble_model, iter_source_units
from model_errors import ModelError

logger = logging.getLogger(__name__)


def assemble_command(
    *source_roots: Annotated[
        Path,
        Parameter(help="Source roots to scan for command handlers (default: config or store root)."),
    ],
    spine_dir_root: Annotated[
        Path | None,
        Parameter(
            name="--spine-dir-root",
            help="Directory holding .spine/spine_model.ser (env: SPINE_DIR_ROOT).",
            group=store_group,
        ),
    ] = None,
    marker: Annotated[
        list[str] | None,
        Parameter(
            name="--marker",
            help="Decorator name marking command handler methods (repeatable).",
            group=discovery_group,
        ),
    ] = None,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> CliResult:
    """Record the types declaring command handlers and merge them into the store.

    Returns
    -------
    CliResult
        Summary of the merged model, or the store error that stopped the pass.
    """
    options = ProjectOptions.from_context(run_context)
    root = options.spine_dir_root(spine_dir_root)
    roots = options.source_roots(source_roots, root)
    discovery = AstMarkerDiscovery(markers=options.markers(marker))
    store = ModelStore.for_root(root)
    logger.debug("Scanning %s for command handlers.", ", ".join(str(r) for r in roots))
    try:
        result = assemble_model(iter_source_units(roots), store=store, discovery=discovery)
    except ModelError as exc:
        return CliResult.from_exception(exc)
    if not result.written:
        return CliResult.success(summary="No command receivers found; the model store is unchanged.")
    return CliResult.success(
        summary=f"Recorded {len(result.merged)} command receivers.",
        paths={"model": result.store_path},
        counts={
            "discovered": len(result.discovered),
            "total": len(result.merged),
        },
    )


__all__ = ["assemble_command"]
