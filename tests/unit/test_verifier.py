"""Tests for the verification pass."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from model_assemble.facts import FactSet
from model_assemble.store import ModelStore
from model_check.classpath import ProjectModule
from model_check.loaders import TypeRegistry
from model_check.verifier import ModelVerifier
from model_errors import DuplicateHandlerError


def test_verify_store_without_model_succeeds(
    tmp_path: Path,
    type_registry: TypeRegistry,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure a missing store is reported and treated as nothing to check."""
    store = ModelStore.for_root(tmp_path)
    with caplog.at_level(logging.WARNING, logger="model_check.verifier"):
        assert ModelVerifier(type_registry).verify_store(store) is None
    assert "No model definition found under" in caplog.text


def test_verify_empty_store_has_no_groups(tmp_path: Path, type_registry: TypeRegistry) -> None:
    """Ensure a zero-length store verifies trivially."""
    store = ModelStore.for_root(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_bytes(b"")
    verdict = ModelVerifier(type_registry).verify_store(store)
    assert verdict is not None
    assert verdict.ok
    assert verdict.group_count == 0


def test_verify_raises_for_duplicate_handlers(type_registry: TypeRegistry) -> None:
    """Ensure a conflicting model fails verification."""
    type_registry.declare("A", ("handle", "X"))
    type_registry.declare("B", ("handle", "X"))
    with pytest.raises(DuplicateHandlerError):
        ModelVerifier(type_registry).verify(FactSet.of(["A", "B"]))


def test_verify_tolerates_unresolved_names(type_registry: TypeRegistry) -> None:
    """Ensure names missing from the classpath do not fail verification."""
    type_registry.declare("Known", ("handle", "X"))
    verdict = ModelVerifier(type_registry).verify(FactSet.of(["Known", "Missing"]))
    assert verdict.ok
    assert verdict.unresolved == ("Missing",)
    assert verdict.group_count == 1


def test_for_project_uses_module_output_dirs(tmp_path: Path) -> None:
    """Ensure the project classpath comes from the module hierarchy."""
    root = ProjectModule(
        name="root",
        submodules=(ProjectModule(name="app", output_dir=tmp_path / "app"),),
    )
    verifier = ModelVerifier.for_project(root)
    assert verifier.classpath == ((tmp_path / "app").resolve(),)
    assert verifier.verify(FactSet()).ok
