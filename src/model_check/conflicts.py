"""Detect message kinds claimed by more than one handler."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from enum import StrEnum

from model_check.descriptors import HandlerMethod, ResolvedType
from model_errors import (
    DuplicateHandlerError,
    MalformedHandlerError,
    ModelCheckError,
    NotAHandlerError,
)
from serde_msgspec import StructBaseStrict


class MalformedReason(StrEnum):
    """Why a single type's handler declarations are rejected."""

    DUPLICATE_MESSAGE_KIND = "duplicate_message_kind"
    MISSING_MESSAGE_KIND = "missing_message_kind"


class DuplicateHandlerConflict(StructBaseStrict, frozen=True):
    """A message kind handled by two or more types."""

    message_kind: str
    types: tuple[str, ...]

    def describe(self) -> str:
        """Return a one-line diagnostic."""
        return (
            f"Message `{self.message_kind}` is handled by more than one type: "
            f"{', '.join(self.types)}."
        )


class MalformedHandler(StructBaseStrict, frozen=True):
    """A type whose own handler methods are inconsistent."""

    type_name: str
    reason: MalformedReason
    message_kind: str | None = None
    methods: tuple[str, ...] = ()

    def describe(self) -> str:
        """Return a one-line diagnostic."""
        methods = ", ".join(self.methods)
        if self.reason is MalformedReason.DUPLICATE_MESSAGE_KIND:
            return (
                f"Type `{self.type_name}` declares several handlers for "
                f"`{self.message_kind}`: {methods}."
            )
        return f"Type `{self.type_name}` declares handlers without a message kind: {methods}."


class ModelVerdict(StructBaseStrict, frozen=True):
    """Result of checking resolved types for handler conflicts.

    ``unresolved`` and ``group_count`` are informational and never affect
    ``ok``.
    """

    duplicates: tuple[DuplicateHandlerConflict, ...] = ()
    malformed: tuple[MalformedHandler, ...] = ()
    non_handlers: tuple[str, ...] = ()
    unresolved: tuple[str, ...] = ()
    group_count: int = 0

    @property
    def ok(self) -> bool:
        """Return True when no conflict of any class was found."""
        return not (self.duplicates or self.malformed or self.non_handlers)

    def messages(self) -> list[str]:
        """Return every diagnostic in deterministic order.

        Returns
        -------
        list[str]
            Malformed handlers, duplicate handlers, then non-handler types.
        """
        lines = [item.describe() for item in self.malformed]
        lines.extend(item.describe() for item in self.duplicates)
        lines.extend(
            f"Type `{name}` does not declare any command-handling methods."
            for name in self.non_handlers
        )
        return lines

    def raise_for_errors(self) -> None:
        """Raise one ``ModelCheckError`` describing every conflict.

        Raises
        ------
        MalformedHandlerError
            Raised when any type conflicts with itself.
        DuplicateHandlerError
            Raised when a message kind has several handler types.
        NotAHandlerError
            Raised when a recorded type declares no handler methods.
        """
        if self.ok:
            return
        error_type: type[ModelCheckError]
        if self.malformed:
            error_type = MalformedHandlerError
        elif self.duplicates:
            error_type = DuplicateHandlerError
        else:
            error_type = NotAHandlerError
        body = "\n".join(f"  - {line}" for line in self.messages())
        msg = f"Command handler model check failed:\n{body}"
        raise error_type(msg, verdict=self)


def group_by_message_kind(resolved: Iterable[ResolvedType]) -> dict[str, frozenset[str]]:
    """Group type names by the message kinds they declare handling for.

    Returns
    -------
    dict[str, frozenset[str]]
        Message kind to the names of the types handling it.
    """
    groups: defaultdict[str, set[str]] = defaultdict(set)
    for resolved_type in resolved:
        for kind in resolved_type.handled_kinds():
            groups[kind].add(resolved_type.name)
    return {kind: frozenset(names) for kind, names in groups.items()}


def _malformed_handlers(resolved_type: ResolvedType) -> list[MalformedHandler]:
    by_kind: defaultdict[str, list[str]] = defaultdict(list)
    missing: list[str] = []
    for handler in resolved_type.handlers:
        if handler.message_kind is None:
            missing.append(handler.name)
        else:
            by_kind[handler.message_kind].append(handler.name)
    found = [
        MalformedHandler(
            type_name=resolved_type.name,
            reason=MalformedReason.DUPLICATE_MESSAGE_KIND,
            message_kind=kind,
            methods=tuple(sorted(methods)),
        )
        for kind, methods in by_kind.items()
        if len(methods) > 1
    ]
    if missing:
        found.append(
            MalformedHandler(
                type_name=resolved_type.name,
                reason=MalformedReason.MISSING_MESSAGE_KIND,
                methods=tuple(sorted(missing)),
            )
        )
    return found


def _merge_same_named(resolved: Iterable[ResolvedType]) -> dict[str, ResolvedType]:
    handlers: defaultdict[str, set[HandlerMethod]] = defaultdict(set)
    for item in resolved:
        handlers[item.name].update(item.handlers)
    return {
        name: ResolvedType(
            name=name,
            handlers=tuple(
                sorted(methods, key=lambda method: (method.name, method.message_kind or ""))
            ),
        )
        for name, methods in handlers.items()
    }


class ConflictChecker:
    """Check resolved command receivers for handler conflicts.

    The verdict does not depend on the order of the input types. Descriptors
    sharing a name are merged into one type declaring the union of their handlers.
    """

    def check(
        self,
        resolved: Iterable[ResolvedType],
        *,
        unresolved: Iterable[str] = (),
    ) -> ModelVerdict:
        """Return the verdict for ``resolved``.

        Parameters
        ----------
        resolved
            Types loaded by the resolver.
        unresolved
            Names that could not be loaded, carried into the verdict for reporting.

        Returns
        -------
        ModelVerdict
            Conflicts found, sorted for stable diagnostics.
        """
        types = _merge_same_named(resolved)
        handlers = [item for item in types.values() if item.is_handler]
        groups = group_by_message_kind(handlers)
        duplicates = [
            DuplicateHandlerConflict(message_kind=kind, types=tuple(sorted(names)))
            for kind, names in groups.items()
            if len(names) > 1
        ]
        malformed = [entry for item in handlers for entry in _malformed_handlers(item)]
        return ModelVerdict(
            duplicates=tuple(sorted(duplicates, key=lambda item: item.message_kind)),
            malformed=tuple(
                sorted(
                    malformed,
                    key=lambda item: (item.type_name, item.reason, item.message_kind or ""),
                )
            ),
            non_handlers=tuple(sorted(name for name, item in types.items() if not item.is_handler)),
            unresolved=tuple(sorted(set(unresolved))),
            group_count=len(groups),
        )


__all__ = [
    "ConflictChecker",
    "DuplicateHandlerConflict",
    "MalformedHandler",
    "MalformedReason",
    "ModelVerdict",
    "group_by_message_kind",
]
