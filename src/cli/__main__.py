"""Module entrypoint for the spine-model CLI."""

from __future__ import annotations

import sys

from cli.app import app


def main() -> None:
    """Run the spine-model CLI and exit with its status."""
    sys.exit(app.meta())


if __name__ == "__main__":
    main()
