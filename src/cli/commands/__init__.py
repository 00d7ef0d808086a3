"""Command implementations for the spine-model CLI."""
