"""Tests for resolving recorded names into types."""

from __future__ import annotations

import logging

import pytest

from model_assemble.facts import FactSet
from model_check.loaders import TypeRegistry
from model_check.resolver import Resolver, unresolved_warning


def test_resolver_splits_resolved_and_unresolved(
    type_registry: TypeRegistry,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure missing names are tolerated and reported in exactly one warning."""
    known = type_registry.declare("Known", ("handle", "cmd.X"))
    with caplog.at_level(logging.WARNING, logger="model_check.resolver"):
        resolution = Resolver(type_registry).resolve(FactSet.of(["Missing", "Known"]))
    assert resolution.resolved == (known,)
    assert resolution.unresolved == ("Missing",)
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Failed to load the class Missing." in warnings[0].getMessage()


def test_resolver_emits_no_warning_when_everything_loads(
    type_registry: TypeRegistry,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Ensure a fully resolvable fact set logs no warning."""
    type_registry.declare("a.A", ("handle", "cmd.X"))
    with caplog.at_level(logging.WARNING, logger="model_check.resolver"):
        resolution = Resolver(type_registry).resolve(FactSet.of(["a.A"]))
    assert resolution.unresolved == ()
    assert caplog.records == []


def test_unresolved_warning_lists_every_name() -> None:
    """Ensure several misses share one sorted warning with the classpath hint."""
    warning = unresolved_warning(["b.B", "a.A"])
    assert warning is not None
    first_line, hint = warning.split("\n")
    assert first_line == "Failed to load classes a.A, b.B."
    assert "sufficient classpath" in hint
    assert unresolved_warning([]) is None
