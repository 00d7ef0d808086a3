"""Shared pytest fixtures for spine-model tests."""

from __future__ import annotations

import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from model_check.loaders import TypeRegistry

type WriteModule = Callable[[str, str], Path]


@pytest.fixture
def type_registry() -> Iterator[TypeRegistry]:
    """Provide an explicit type registry that is reset after each test.

    Yields
    ------
    TypeRegistry
        Empty registry.
    """
    registry = TypeRegistry()
    yield registry
    registry.reset()


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Return an empty source root directory.

    Returns
    -------
    Path
        Directory under the test's temporary path.
    """
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def write_module(source_root: Path) -> WriteModule:
    """Return a helper writing dedented module text under ``source_root``.

    Returns
    -------
    WriteModule
        Callable taking a dotted module name and its source text.
    """

    def _write(module: str, text: str) -> Path:
        parts = module.split(".")
        for depth in range(1, len(parts)):
            package_init = source_root.joinpath(*parts[:depth], "__init__.py")
            package_init.parent.mkdir(parents=True, exist_ok=True)
            if not package_init.exists():
                package_init.write_text("", encoding="utf-8")
        path = source_root.joinpath(*parts).with_suffix(".py")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return path

    return _write
