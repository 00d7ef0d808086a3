"""Verification pass command: reject conflicting command handlers."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.groups import classpath_group, discovery_group, store_group
from cli.options import ProjectOptions
from cli.result import CliResult
from model_assemble import ModelStore
from model_check import ModelVerifier, SourceTypeLoader
from model_errors import ModelError


def check_command(
    *,
    spine_dir_root: Annotated[
        Path | None,
        Parameter(
            name="--spine-dir-root",
            help="Directory holding .spine/spine_model.ser (env: SPINE_DIR_ROOT).",
            group=store_group,
        ),
    ] = None,
    classpath: Annotated[
        list[Path] | None,
        Parameter(
            name="--classpath",
            help="Source directory recorded types are loaded from (repeatable, first wins).",
            group=classpath_group,
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
    """Verify that every command is handled by exactly one type.

    Returns
    -------
    CliResult
        Success summary, or the model error with its exit code.
    """
    options = ProjectOptions.from_context(run_context)
    root = options.spine_dir_root(spine_dir_root)
    loader = SourceTypeLoader(markers=options.markers(marker))
    verifier = ModelVerifier(loader, options.classpath(classpath, root))
    try:
        verdict = verifier.verify_store(ModelStore.for_root(root))
    except ModelError as exc:
        return CliResult.from_exception(exc)
    if verdict is None:
        return CliResult.success(summary="No model to check.")
    summary = f"Model check passed: {verdict.group_count} message kinds, each with one handler."
    if verdict.unresolved:
        summary += f" Skipped {len(verdict.unresolved)} unresolved types."
    return CliResult.success(
        summary=summary,
        counts={
            "message_kinds": verdict.group_count,
            "unresolved": len(verdict.unresolved),
        },
    )


__all__ = ["check_command"]
