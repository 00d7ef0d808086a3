"""Shared utilities for spine-model-tools."""

from utils.file_io import read_toml, write_bytes_atomic
from utils.registry import MutableRegistry

__all__ = [
    "MutableRegistry",
    "read_toml",
    "write_bytes_atomic",
]
