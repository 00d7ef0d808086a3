"""Error taxonomy for model assembly and model verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from model_check.conflicts import ModelVerdict


class ModelError(RuntimeError):
    """Base error for model assembly and verification failures."""

    exit_code: int = 1


class StoreError(ModelError):
    """Failure reading or writing the persisted model store."""

    exit_code: int = 10

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class StoreCorruptionError(StoreError):
    """Persisted store exists and is non-empty but cannot be decoded."""

    exit_code: int = 10


class StoreIOError(StoreError):
    """Persisted store cannot be created, read, or written."""

    exit_code: int = 11


class ModelCheckError(ModelError):
    """Verification found conflicts in the command-handling model."""

    exit_code: int = 12

    def __init__(self, message: str, *, verdict: ModelVerdict | None = None) -> None:
        super().__init__(message)
        self.verdict = verdict


class DuplicateHandlerError(ModelCheckError):
    """Two or more types handle the same message kind."""


class MalformedHandlerError(ModelCheckError):
    """A single type declares an invalid set of handler methods."""


class NotAHandlerError(ModelCheckError):
    """A recorded type resolves but declares no handler methods."""


__all__ = [
    "DuplicateHandlerError",
    "MalformedHandlerError",
    "ModelCheckError",
    "ModelError",
    "NotAHandlerError",
    "StoreCorruptionError",
    "StoreError",
    "StoreIOError",
]
