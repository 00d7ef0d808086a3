"""Tests for classpath assembly across a module hierarchy."""

from __future__ import annotations

from pathlib import Path

from model_check.classpath import (
    ProjectModule,
    assemble_classpath,
    destination_dir,
    normalize_classpath,
)


def test_destination_dir_is_none_without_output(tmp_path: Path) -> None:
    """Ensure modules without an output directory contribute nothing."""
    assert destination_dir(ProjectModule(name="docs")) is None
    assert destination_dir(ProjectModule(name="app", output_dir=tmp_path)) == tmp_path.resolve()


def test_assemble_classpath_walks_whole_hierarchy(tmp_path: Path) -> None:
    """Ensure every module's output directory is included in hierarchy order."""
    root = ProjectModule(
        name="root",
        output_dir=tmp_path / "root",
        submodules=(
            ProjectModule(
                name="server",
                output_dir=tmp_path / "server",
                submodules=(ProjectModule(name="server-api", output_dir=tmp_path / "api"),),
            ),
            ProjectModule(name="docs"),
            ProjectModule(name="client", output_dir=tmp_path / "root"),
        ),
    )
    assert [module.name for module in root.walk()] == [
        "root",
        "server",
        "server-api",
        "docs",
        "client",
    ]
    assert assemble_classpath(root) == (
        (tmp_path / "root").resolve(),
        (tmp_path / "server").resolve(),
        (tmp_path / "api").resolve(),
    )


def test_normalize_classpath_keeps_first_occurrence(tmp_path: Path) -> None:
    """Ensure duplicates collapse while the original order is kept."""
    entries = [tmp_path / "b", tmp_path / "a", tmp_path / "b" / ".." / "b"]
    assert normalize_classpath(entries) == ((tmp_path / "b").resolve(), (tmp_path / "a").resolve())
