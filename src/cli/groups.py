"""Shared help-panel groups for the spine-model CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Session and configuration options.",
    sort_key=0,
)

store_group = Group(
    "Model Store",
    help="Locate the persisted command handler model.",
    sort_key=1,
)

discovery_group = Group(
    "Discovery",
    help="Control how command handlers are found in source code.",
    sort_key=2,
)

classpath_group = Group(
    "Classpath",
    help="Locations the model check resolves recorded types against.",
    sort_key=3,
)

admin_group = Group(
    "Admin",
    help="Administrative commands and help.",
    sort_key=99,
)

__all__ = [
    "admin_group",
    "classpath_group",
    "discovery_group",
    "session_group",
    "store_group",
]
