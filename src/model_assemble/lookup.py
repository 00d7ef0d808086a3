"""Aggregation pass: collect marked types and merge them into the model store."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from model_assemble.collector import Collector
from model_assemble.discovery import AstMarkerDiscovery, MarkerDiscovery, SourceUnit
from model_assemble.facts import FactSet, merge_fact_sets
from model_assemble.store import ModelStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyResult:
    """Outcome of one aggregation pass."""

    store_path: Path
    discovered: FactSet
    merged: FactSet
    written: bool


def assemble_model(
    units: Iterable[SourceUnit],
    *,
    store: ModelStore,
    discovery: MarkerDiscovery | None = None,
) -> AssemblyResult:
    """Record command receivers found in ``units`` and persist them.

    Parameters
    ----------
    units
        Modules processed by the current pass.
    store
        Store to merge into.
    discovery
        Marker discovery capability; defaults to ``AstMarkerDiscovery``.

    Returns
    -------
    AssemblyResult
        Facts discovered in this pass and the merged store contents.
    """
    finder = discovery if discovery is not None else AstMarkerDiscovery()
    collector = Collector()
    collector.record_all(finder.discover(units))
    discovered = collector.finish()
    prior = store.read()
    merged = merge_fact_sets(prior, discovered)
    written = store.write(merged)
    logger.info(
        "Recorded %d command receivers (%d new) in %s.",
        len(merged),
        len(merged) - len(prior),
        store.path,
    )
    return AssemblyResult(
        store_path=store.path,
        discovered=discovered,
        merged=merged,
        written=written,
    )


__all__ = ["AssemblyResult", "assemble_model"]
