"""Tests for the type-loading capabilities."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from model_check.descriptors import HandlerMethod, ResolvedType
from model_check.loaders import SourceTypeLoader, TypeRegistry


def test_type_registry_declare_and_load(type_registry: TypeRegistry) -> None:
    """Ensure declared types resolve and unknown names are a typed miss."""
    declared = type_registry.declare("a.A", ("handle", "cmd.X"))
    assert type_registry.load("a.A") == declared
    assert type_registry.load("missing.Type") is None
    assert "a.A" in type_registry
    assert len(type_registry) == 1


def test_type_registry_rejects_duplicate_registration(type_registry: TypeRegistry) -> None:
    """Ensure a name cannot be registered twice without overwrite."""
    type_registry.declare("a.A", ("handle", "cmd.X"))
    with pytest.raises(ValueError, match=r"a\.A"):
        type_registry.declare("a.A", ("handle", "cmd.Y"))
    type_registry.register(ResolvedType(name="a.A"), overwrite=True)
    loaded = type_registry.load("a.A")
    assert loaded is not None
    assert not loaded.is_handler


def test_type_registry_reset_drops_everything(type_registry: TypeRegistry) -> None:
    """Ensure reset leaves an empty registry."""
    type_registry.declare("a.A", ("handle", "cmd.X"))
    type_registry.reset()
    assert len(type_registry) == 0
    assert type_registry.load("a.A") is None


def test_source_loader_resolves_imported_message_kinds(
    source_root: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure annotations are qualified through absolute and relative imports."""
    write_module(
        "shop.commands",
        """
        class CreateOrder: ...
        class CancelOrder: ...
        """,
    )
    write_module(
        "shop.handlers",
        """
        import billing.commands as bc
        from spine import assign
        from .commands import CreateOrder
        from . import commands


        class Local: ...


        class Orders:
            @assign
            def create(self, cmd: CreateOrder) -> None: ...

            @assign
            def cancel(self, cmd: "commands.CancelOrder") -> None: ...

            @assign
            def charge(self, cmd: bc.Charge) -> None: ...

            @assign
            def local(self, cmd: Local) -> None: ...

            @assign
            def unknown(self, cmd: Mystery) -> None: ...

            def helper(self, cmd: CreateOrder) -> None: ...
        """,
    )
    loaded = SourceTypeLoader().load("shop.handlers.Orders", [source_root])
    assert loaded == ResolvedType(
        name="shop.handlers.Orders",
        handlers=(
            HandlerMethod(name="create", message_kind="shop.commands.CreateOrder"),
            HandlerMethod(name="cancel", message_kind="shop.commands.CancelOrder"),
            HandlerMethod(name="charge", message_kind="billing.commands.Charge"),
            HandlerMethod(name="local", message_kind="shop.handlers.Local"),
            HandlerMethod(name="unknown", message_kind="Mystery"),
        ),
    )


def test_source_loader_nested_class_and_package_module(
    source_root: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure nested classes and package __init__ modules are found."""
    write_module(
        "app.__init__",
        """
        from .messages import Ping


        class Outer:
            class Inner:
                @assign
                def on(self, cmd: Ping) -> None: ...
        """,
    )
    loaded = SourceTypeLoader().load("app.Outer.Inner", [source_root])
    assert loaded is not None
    assert loaded.handled_kinds() == frozenset({"app.messages.Ping"})


def test_source_loader_qualifies_kinds_by_import_path(
    source_root: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure message kinds keep the import path used by the handler module."""
    write_module("shop.commands", "class Ping: ...\n")
    write_module("shop.__init__", "from shop.commands import Ping\n")
    write_module(
        "shop.handlers",
        """
        from shop import Ping
        from shop.commands import Ping as DirectPing


        class ViaPackage:
            @assign
            def on(self, cmd: Ping) -> None: ...


        class ViaModule:
            @assign
            def on(self, cmd: DirectPing) -> None: ...
        """,
    )
    loader = SourceTypeLoader()
    via_package = loader.load("shop.handlers.ViaPackage", [source_root])
    via_module = loader.load("shop.handlers.ViaModule", [source_root])
    assert via_package is not None
    assert via_module is not None
    assert via_package.handled_kinds() == frozenset({"shop.Ping"})
    assert via_module.handled_kinds() == frozenset({"shop.commands.Ping"})


def test_source_loader_missing_kind_and_static_methods(
    source_root: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure unannotated parameters give no kind and static methods have no self."""
    write_module(
        "m",
        """
        class H:
            @assign
            def bare(self, cmd) -> None: ...

            @assign
            def no_params(self) -> None: ...

            @staticmethod
            @assign
            def static(cmd: Ping) -> None: ...
        """,
    )
    loaded = SourceTypeLoader().load("m.H", [source_root])
    assert loaded is not None
    assert [(h.name, h.message_kind) for h in loaded.handlers] == [
        ("bare", None),
        ("no_params", None),
        ("static", "Ping"),
    ]


def test_source_loader_first_classpath_entry_wins(tmp_path: Path) -> None:
    """Ensure the earliest classpath entry holding the module is used."""
    for entry, kind in (("first", "First"), ("second", "Second")):
        module_file = tmp_path / entry / "m.py"
        module_file.parent.mkdir()
        module_file.write_text(
            f"class H:\n    @assign\n    def on(self, cmd: {kind}) -> None: ...\n",
            encoding="utf-8",
        )
    loaded = SourceTypeLoader().load("m.H", [tmp_path / "first", tmp_path / "second"])
    assert loaded is not None
    assert loaded.handled_kinds() == frozenset({"First"})


def test_source_loader_not_found(
    source_root: Path,
    write_module: Callable[[str, str], Path],
) -> None:
    """Ensure missing modules and classes resolve to None."""
    write_module("m", "class H: ...\n")
    loader = SourceTypeLoader()
    assert loader.load("m.Missing", [source_root]) is None
    assert loader.load("other.H", [source_root]) is None
    assert loader.load("m.H", []) is None
    assert loader.load("H", [source_root]) is None
