"""Fact sets of command-receiving type names and their persisted encoding."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

import msgspec

from model_errors import StoreCorruptionError
from serde_msgspec import (
    StructBaseCompat,
    dumps_msgpack,
    loads_msgpack,
    validation_error_payload,
)

DESTINATION_PATH = Path(".spine") / "spine_model.ser"


class CommandReceivers(StructBaseCompat, frozen=True):
    """Wire message holding the fully-qualified names of command receivers.

    Unknown fields are tolerated on decode so payloads written by newer
    tools still merge without loss of the names this schema knows about.
    """

    command_receiving_type: tuple[str, ...] = ()


def canonical_names(names: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate and sort type names.

    Parameters
    ----------
    names
        Type names in any order, possibly repeated.

    Returns
    -------
    tuple[str, ...]
        Unique names in ascending order.
    """
    return tuple(sorted(set(names)))


@dataclass(frozen=True)
class FactSet:
    """Immutable set of fully-qualified command-receiving type names.

    Iteration always follows the canonical sorted order.
    """

    names: frozenset[str] = frozenset()

    @classmethod
    def of(cls, names: Iterable[str]) -> FactSet:
        """Build a fact set from any iterable of names.

        Returns
        -------
        FactSet
            Fact set holding each distinct name once.
        """
        return cls(frozenset(names))

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted_names())

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    @property
    def is_empty(self) -> bool:
        """Return True when no facts are recorded."""
        return not self.names

    def sorted_names(self) -> tuple[str, ...]:
        """Return the names in canonical order.

        Returns
        -------
        tuple[str, ...]
            Sorted, unique names.
        """
        return canonical_names(self.names)

    def union(self, other: FactSet) -> FactSet:
        """Return the set union of this fact set and ``other``.

        Returns
        -------
        FactSet
            Fact set with the names of both operands.
        """
        return FactSet(self.names | other.names)

    def to_message(self) -> CommandReceivers:
        """Return the wire message in canonical order.

        Returns
        -------
        CommandReceivers
            Message ready for encoding.
        """
        return CommandReceivers(command_receiving_type=self.sorted_names())

    @classmethod
    def from_message(cls, message: CommandReceivers) -> FactSet:
        """Build a fact set from a decoded wire message.

        Returns
        -------
        FactSet
            Fact set with duplicates from the message collapsed.
        """
        return cls.of(message.command_receiving_type)


EMPTY_FACT_SET = FactSet()


def merge_fact_sets(*fact_sets: FactSet) -> FactSet:
    """Union any number of fact sets.

    The result does not depend on argument order or on repeated arguments.

    Returns
    -------
    FactSet
        Union of every input.
    """
    merged: set[str] = set()
    for fact_set in fact_sets:
        merged.update(fact_set.names)
    return FactSet(frozenset(merged))


def encode_fact_set(fact_set: FactSet) -> bytes:
    """Encode a fact set as a MessagePack ``CommandReceivers`` message.

    Returns
    -------
    bytes
        Encoded payload with names in canonical order.
    """
    return dumps_msgpack(fact_set.to_message())


def decode_fact_set(data: bytes, *, source: Path | str | None = None) -> FactSet:
    """Decode a persisted fact set.

    Parameters
    ----------
    data
        Encoded payload. Zero-length input decodes to the empty fact set.
    source
        Optional origin of the payload, used in error messages.

    Returns
    -------
    FactSet
        Decoded fact set.

    Raises
    ------
    StoreCorruptionError
        Raised when the payload cannot be decoded.
    """
    if not data:
        return EMPTY_FACT_SET
    try:
        message = loads_msgpack(data, target_type=CommandReceivers)
    except (msgspec.DecodeError, UnicodeDecodeError) as exc:
        details = validation_error_payload(exc)
        where = f" in {source}" if source is not None else ""
        msg = f"Cannot decode the model store{where}: {details.get('summary', details['type'])}"
        path = Path(source) if source is not None else None
        raise StoreCorruptionError(msg, path=path) from exc
    return FactSet.from_message(message)


__all__ = [
    "DESTINATION_PATH",
    "EMPTY_FACT_SET",
    "CommandReceivers",
    "FactSet",
    "canonical_names",
    "decode_fact_set",
    "encode_fact_set",
    "merge_fact_sets",
]
