"""Result action handler for Cyclopts integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.console import Console

from cli.exit_codes import ExitCode
from cli.result import CliResult

if TYPE_CHECKING:
    from cyclopts import App


def render_result(result: Any, *, console: Console | None = None) -> int:
    """Print a command result and convert it to an exit code.

    Parameters
    ----------
    result
        The return value from the command function.
    console
        Console to print to; a new stdout console by default.

    Returns
    -------
    int
        Exit code for the process.
    """
    out = console if console is not None else Console()

    if result is None:
        return ExitCode.SUCCESS

    if isinstance(result, int):
        return result

    if isinstance(result, CliResult):
        if result.summary:
            out.print(result.summary, highlight=False)
        if result.paths:
            out.print("Written:")
            for name, path in sorted(result.paths.items()):
                out.print(f"  {name}: {path}", highlight=False)
        for name, count in sorted(result.counts.items()):
            out.print(f"{name}: {count}", highlight=False)
        return int(result.exit_code)

    out.print(f"Unexpected command return type: {type(result).__name__} (value: {result!r})")
    return ExitCode.GENERAL_ERROR


def cli_result_action(
    app: App,
    cmd: object,
    result: Any,
) -> int:
    """Handle command results and convert to exit codes.

    This function is registered as the ``result_action`` for the CLI app.

    Returns
    -------
    int
        Exit code for the process.
    """
    _ = app
    _ = cmd
    return render_result(result)


__all__ = ["cli_result_action", "render_result"]
