"""Persisted model store: merge discovered facts with on-disk history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from core_types import PathLike
from model_assemble.facts import (
    DESTINATION_PATH,
    EMPTY_FACT_SET,
    FactSet,
    decode_fact_set,
    encode_fact_set,
    merge_fact_sets,
)
from model_errors import StoreIOError
from utils.file_io import write_bytes_atomic

logger = logging.getLogger(__name__)

DEFAULT_SPINE_DIR_ROOT = "."


def merge_prior(
    prior: bytes | None,
    new: FactSet,
    *,
    source: PathLike | None = None,
) -> FactSet:
    """Merge previously persisted bytes with the facts of the current pass.

    Parameters
    ----------
    prior
        Bytes of the existing store, or ``None`` when it does not exist.
        Zero-length bytes are treated as the empty fact set.
    new
        Facts collected by the current pass.
    source
        Optional origin of ``prior`` for error messages.

    Returns
    -------
    FactSet
        Deduplicated union of the prior and new facts.
    """
    prior_facts = decode_fact_set(prior, source=source) if prior else EMPTY_FACT_SET
    return merge_fact_sets(prior_facts, new)


@dataclass(frozen=True)
class ModelStore:
    """Filesystem location of the persisted command-receiver fact set.

    Concurrent writers targeting the same root are not coordinated; callers
    serialize merges.
    """

    root: Path = Path(DEFAULT_SPINE_DIR_ROOT)

    @classmethod
    def for_root(cls, spine_dir_root: PathLike | None = None) -> ModelStore:
        """Return the store under ``spine_dir_root`` (current directory by default).

        Returns
        -------
        ModelStore
            Store rooted at the given directory.
        """
        return cls(Path(spine_dir_root if spine_dir_root is not None else DEFAULT_SPINE_DIR_ROOT))

    @property
    def path(self) -> Path:
        """Return the store file path."""
        return self.root / DESTINATION_PATH

    def exists(self) -> bool:
        """Return True when the store file exists (possibly empty)."""
        return self.path.is_file()

    def read_bytes(self) -> bytes | None:
        """Return the raw store payload, or ``None`` when the file is absent.

        Raises
        ------
        StoreIOError
            Raised when the file exists but cannot be read.
        """
        if not self.path.exists():
            return None
        try:
            return self.path.read_bytes()
        except OSError as exc:
            msg = f"Cannot read the model store {self.path}: {exc}"
            raise StoreIOError(msg, path=self.path) from exc

    def read(self) -> FactSet:
        """Return the persisted fact set; absent or empty files yield no facts.

        Returns
        -------
        FactSet
            Persisted facts.
        """
        payload = self.read_bytes()
        if not payload:
            return EMPTY_FACT_SET
        return decode_fact_set(payload, source=self.path)

    def write(self, fact_set: FactSet) -> bool:
        """Atomically replace the store with ``fact_set``.

        An empty fact set is not written, so the store never holds a file
        that disagrees with "no facts recorded".

        Returns
        -------
        bool
            True when the file was written.

        Raises
        ------
        StoreIOError
            Raised when the store directory or file cannot be written.
        """
        if fact_set.is_empty:
            logger.debug("No command receivers to persist under %s.", self.path)
            return False
        try:
            write_bytes_atomic(self.path, encode_fact_set(fact_set))
        except OSError as exc:
            msg = f"Cannot write the model store {self.path}: {exc}"
            raise StoreIOError(msg, path=self.path) from exc
        logger.debug("Persisted %d command receivers to %s.", len(fact_set), self.path)
        return True

    def merge(self, fact_set: FactSet) -> FactSet:
        """Merge ``fact_set`` into the persisted store and write the result.

        Returns
        -------
        FactSet
            Merged facts now on disk.
        """
        merged = merge_prior(self.read_bytes(), fact_set, source=self.path)
        self.write(merged)
        return merged


__all__ = ["DEFAULT_SPINE_DIR_ROOT", "ModelStore", "merge_prior"]
