"""Main application setup for the spine-model CLI."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Annotated, Literal

from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError
from rich.console import Console

from cli.commands.version import get_version
from cli.config_loader import load_effective_config_with_sources
from cli.context import RunContext
from cli.exit_codes import ExitCode
from cli.groups import admin_group, session_group
from cli.result_action import cli_result_action
from model_errors import ModelError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_LEVEL_ENV = "SPINE_MODEL_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

_HELP_EPILOGUE = """
Examples:
  spine-model assemble src               Record command handlers declared under src/
  spine-model check --classpath src      Verify every command has exactly one handler
  spine-model show --json                Print the persisted model
  spine-model config show --with-sources Show effective configuration

Environment Variables:
  SPINE_DIR_ROOT           Directory holding .spine/spine_model.ser
  SPINE_MODEL_LOG_LEVEL    Default log level (DEBUG, INFO, WARNING, ERROR)
"""

app = App(
    name="spine-model",
    help="Assemble and verify the command handler model of a project.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
    result_action=cli_result_action,
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)

app.meta.group_parameters = session_group

_error_console = Console(stderr=True)


@dataclass(frozen=True)
class SessionOptions:
    """Session-level configuration parameters."""

    config_file: Annotated[
        str | None,
        Parameter(
            name="--config",
            help="Path to configuration file (overrides default search).",
            group=session_group,
        ),
    ] = None
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None,
        Parameter(
            name="--log-level",
            help="Logging verbosity level (default: config log_level, then INFO).",
            env_var=LOG_LEVEL_ENV,
            group=session_group,
        ),
    ] = None


_DEFAULT_SESSION_OPTIONS = SessionOptions()


def _effective_log_level(requested: str | None, configured: object) -> str:
    level = requested or (configured if isinstance(configured, str) else None) or DEFAULT_LOG_LEVEL
    level = level.upper()
    if level not in LOG_LEVELS:
        msg = f"Unsupported log level {level!r}."
        raise ValueError(msg)
    return level


def _invoke(tokens: list[str], *, run_context: RunContext) -> int:
    command, bound, ignored = app.parse_args(tokens, exit_on_error=False, print_error=True)
    for name, hint in ignored.items():
        if hint is RunContext or name == "run_context":
            bound.arguments[name] = run_context
    result = command(*bound.args, **bound.kwargs)
    return cli_result_action(app, command, result)


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    session: Annotated[SessionOptions, Parameter(name="*")] = _DEFAULT_SESSION_OPTIONS,
) -> int:
    """Meta launcher for config selection and context injection.

    Returns
    -------
    int
        Exit status code from command execution.
    """
    try:
        config_sources = load_effective_config_with_sources(session.config_file)
        log_level = _effective_log_level(session.log_level, config_sources.get("log_level"))
        logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")
        run_context = RunContext(
            log_level=log_level,
            config_contents=config_sources.to_flat_dict(),
            config_sources=config_sources,
        )
        logger.debug("Running %s in %s.", list(tokens), os.getcwd())
        return _invoke(list(tokens), run_context=run_context)
    except CycloptsError as exc:
        return int(ExitCode.from_exception(exc))
    except (ModelError, OSError, ValueError, TypeError) as exc:
        _error_console.print(f"[bold red]Error:[/bold red] {exc}", highlight=False)
        return int(ExitCode.from_exception(exc))


app.command("cli.commands.assemble:assemble_command", name="assemble", alias="a")
app.command("cli.commands.check:check_command", name="check", alias="c")
app.command("cli.commands.show:show_command", name="show")

_config_app = App(name="config", help="Configuration management.")
_config_app.command("cli.commands.config:show_config", name="show")
_config_app.command("cli.commands.config:init_config", name="init")
app.command(_config_app, alias="cfg")
app.command("cli.commands.version:version_command", name="version", alias="v", group=admin_group)


def main() -> int:
    """Run the spine-model CLI.

    Returns
    -------
    int
        Process exit status.
    """
    return app.meta()


__all__ = ["app", "main"]
