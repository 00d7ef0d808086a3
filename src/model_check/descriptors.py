"""Resolved descriptors of command-receiving types."""

from __future__ import annotations

from serde_msgspec import StructBaseStrict


class HandlerMethod(StructBaseStrict, frozen=True):
    """A method assigned to handle one message kind.

    ``message_kind`` is ``None`` when the method does not declare the kind
    of message it accepts.
    """

    name: str
    message_kind: str | None = None

    @property
    def signature(self) -> str:
        """Return a ``name(kind)`` rendering used in diagnostics."""
        return f"{self.name}({self.message_kind or ''})"


class ResolvedType(StructBaseStrict, frozen=True):
    """A type loaded from the classpath with its declared handler methods."""

    name: str
    handlers: tuple[HandlerMethod, ...] = ()

    @property
    def is_handler(self) -> bool:
        """Return True when the type declares at least one handler method."""
        return bool(self.handlers)

    def handled_kinds(self) -> frozenset[str]:
        """Return the message kinds this type declares handling for.

        Returns
        -------
        frozenset[str]
            Declared message kinds, excluding methods without one.
        """
        return frozenset(
            handler.message_kind for handler in self.handlers if handler.message_kind is not None
        )


__all__ = ["HandlerMethod", "ResolvedType"]
