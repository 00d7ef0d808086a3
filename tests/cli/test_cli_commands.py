"""Tests for the spine-model CLI commands."""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from cli.commands.assemble import assemble_command
from cli.commands.check import check_command
from cli.commands.config import init_config, show_config
from cli.commands.show import show_command
from cli.commands.version import version_command
from cli.config_loader import load_effective_config_with_sources
from cli.config_source import ConfigWithSources
from cli.context import RunContext
from cli.exit_codes import ExitCode
from cli.result import CliResult
from cli.result_action import render_result

_ORDERS = """
from spine import assign
from shop.commands import CreateOrder


class Orders:
    @assign
    def create(self, cmd: CreateOrder) -> None: ...
"""

_DUPLICATE = """
from spine import assign
from shop.commands import CreateOrder


class Audit:
    @assign
    def create(self, cmd: CreateOrder) -> None: ...
"""


@pytest.fixture
def run_context() -> RunContext:
    """Return a run context with no configuration values.

    Returns
    -------
    RunContext
        Context isolated from any config file on disk.
    """
    return RunContext(log_level="INFO", config_sources=ConfigWithSources(values={}))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SPINE_DIR_ROOT", raising=False)
    monkeypatch.chdir(tmp_path)


def _shop(write_module: Callable[[str, str], Path]) -> None:
    write_module("shop.commands", "class CreateOrder: ...\n")
    write_module("shop.orders", _ORDERS)


def test_assemble_and_check(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    run_context: RunContext,
) -> None:
    """Ensure a clean project assembles and checks successfully."""
    _shop(write_module)
    assembled = assemble_command(source_root, spine_dir_root=tmp_path, run_context=run_context)
    assert assembled.ok
    assert assembled.paths["model"] == tmp_path / ".spine" / "spine_model.ser"
    assert assembled.counts["total"] == 1

    checked = check_command(
        spine_dir_root=tmp_path,
        classpath=[source_root],
        run_context=run_context,
    )
    assert checked.ok
    assert checked.summary is not None
    assert "1 message kinds" in checked.summary


def test_check_reports_duplicate_handlers(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    run_context: RunContext,
) -> None:
    """Ensure conflicting handlers produce the model-conflict exit code."""
    _shop(write_module)
    write_module("shop.audit", _DUPLICATE)
    assemble_command(source_root, spine_dir_root=tmp_path, run_context=run_context)

    result = check_command(spine_dir_root=tmp_path, classpath=[source_root], run_context=run_context)
    assert result.exit_code == ExitCode.MODEL_CONFLICT
    assert result.summary is not None
    assert "shop.commands.CreateOrder" in result.summary
    assert "shop.audit.Audit, shop.orders.Orders" in result.summary


def test_check_without_model_succeeds(tmp_path: Path, run_context: RunContext) -> None:
    """Ensure checking a project that never assembled a model is not an error."""
    result = check_command(spine_dir_root=tmp_path, run_context=run_context)
    assert result.ok
    assert result.summary == "No model to check."


def test_assemble_without_handlers_writes_nothing(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    run_context: RunContext,
) -> None:
    """Ensure a pass with no handlers leaves no store behind."""
    write_module("shop.commands", "class CreateOrder: ...\n")
    result = assemble_command(source_root, spine_dir_root=tmp_path, run_context=run_context)
    assert result.ok
    assert not (tmp_path / ".spine").exists()


@pytest.mark.parametrize("payload", [b"\xc1", b"\x81\xb6command_receiving_type\x91\xa2\xff\xfe"])
def test_corrupt_store_exit_code(tmp_path: Path, run_context: RunContext, payload: bytes) -> None:
    """Ensure a corrupt store maps to the store-corruption exit code."""
    store_path = tmp_path / ".spine" / "spine_model.ser"
    store_path.parent.mkdir()
    store_path.write_bytes(payload)
    shown = show_command(spine_dir_root=tmp_path, run_context=run_context)
    assert isinstance(shown, CliResult)
    assert shown.exit_code == ExitCode.STORE_CORRUPTION
    checked = check_command(spine_dir_root=tmp_path, run_context=run_context)
    assert checked.exit_code == ExitCode.STORE_CORRUPTION


def test_spine_dir_root_from_environment(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    monkeypatch: pytest.MonkeyPatch,
    run_context: RunContext,
) -> None:
    """Ensure SPINE_DIR_ROOT is used when no flag is given."""
    _shop(write_module)
    env_root = tmp_path / "env-root"
    monkeypatch.setenv("SPINE_DIR_ROOT", str(env_root))
    assemble_command(source_root, run_context=run_context)
    assert (env_root / ".spine" / "spine_model.ser").is_file()

    flag_root = tmp_path / "flag-root"
    assemble_command(source_root, spine_dir_root=flag_root, run_context=run_context)
    assert (flag_root / ".spine" / "spine_model.ser").is_file()


def test_config_drives_source_roots_and_classpath(
    tmp_path: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure configured source roots and modules replace the command-line flags."""
    _shop(write_module)
    write_module("shop.audit", _DUPLICATE)
    (tmp_path / "spine-model.toml").write_text(
        'spine_dir_root = "build"\nsource_roots = ["src"]\n\n'
        '[[modules]]\nname = "shop"\noutput_dir = "src"\n',
        encoding="utf-8",
    )
    sources = load_effective_config_with_sources(None, start=tmp_path)
    context = RunContext(
        log_level="INFO",
        config_contents=sources.to_flat_dict(),
        config_sources=sources,
    )
    assembled = assemble_command(run_context=context)
    assert assembled.paths["model"] == tmp_path / "build" / ".spine" / "spine_model.ser"

    checked = check_command(run_context=context)
    assert checked.exit_code == ExitCode.MODEL_CONFLICT


def test_show_json(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    run_context: RunContext,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure show --json prints the recorded names."""
    _shop(write_module)
    assemble_command(source_root, spine_dir_root=tmp_path, run_context=run_context)
    capsys.readouterr()
    assert show_command(spine_dir_root=tmp_path, as_json=True, run_context=run_context) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["command_receiving_type"] == ["shop.orders.Orders"]
    assert payload["exists"] is True


def test_show_lists_names(
    tmp_path: Path,
    source_root: Path,
    write_module: Callable[[str, str], Path],
    run_context: RunContext,
) -> None:
    """Ensure the plain listing names every recorded type."""
    _shop(write_module)
    assemble_command(source_root, spine_dir_root=tmp_path, run_context=run_context)
    shown = show_command(spine_dir_root=tmp_path, run_context=run_context)
    assert isinstance(shown, CliResult)
    assert shown.summary is not None
    assert shown.summary.splitlines()[1] == "  shop.orders.Orders"


def test_config_show_and_init(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure config init writes a template that config show can read back."""
    assert init_config() == 0
    with pytest.raises(FileExistsError):
        init_config()
    assert init_config(force=True) == 0

    assert show_config(run_context=None) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["markers"] == ["assign"]
    assert payload["source_roots"] == ["src"]

    assert show_config(with_sources=True, run_context=None) == 0
    with_sources = json.loads(capsys.readouterr().out)
    assert with_sources["spine_dir_root"]["source"] == "config_file"
    assert with_sources["spine_dir_root"]["location"] == str(tmp_path.resolve() / "spine-model.toml")


def test_version_command(capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure version output lists the tool and its dependencies."""
    assert version_command() == 0
    payload = json.loads(capsys.readouterr().out)
    assert "spine-model-tools" in payload
    assert set(payload["dependencies"]) == {"cyclopts", "msgspec", "rich"}


def test_render_result_prints_summary_and_returns_exit_code() -> None:
    """Ensure command results are rendered and mapped to exit codes."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)
    result = CliResult.success(summary="done", paths={"model": Path("m.ser")})
    assert render_result(result, console=console) == 0
    assert "done" in buffer.getvalue()
    assert "model: m.ser" in buffer.getvalue()
    assert render_result(None, console=console) == 0
    assert render_result(3, console=console) == 3
    assert render_result(object(), console=console) == ExitCode.GENERAL_ERROR
