"""Collect command-receiving types and persist them across compilation passes."""

from model_assemble.collector import Collector
from model_assemble.discovery import (
    DEFAULT_MARKERS,
    AstMarkerDiscovery,
    MarkerDiscovery,
    SourceUnit,
    iter_source_units,
)
from model_assemble.facts import (
    DESTINATION_PATH,
    CommandReceivers,
    FactSet,
    canonical_names,
    decode_fact_set,
    encode_fact_set,
    merge_fact_sets,
)
from model_assemble.lookup import AssemblyResult, assemble_model
from model_assemble.store import ModelStore, merge_prior

__all__ = [
    "DEFAULT_MARKERS",
    "DESTINATION_PATH",
    "AssemblyResult",
    "AstMarkerDiscovery",
    "Collector",
    "CommandReceivers",
    "FactSet",
    "MarkerDiscovery",
    "ModelStore",
    "SourceUnit",
    "assemble_model",
    "canonical_names",
    "decode_fact_set",
    "encode_fact_set",
    "iter_source_units",
    "merge_fact_sets",
    "merge_prior",
]
