"""Version reporting for the spine-model CLI."""

from __future__ import annotations

import platform
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from serde_msgspec import dumps_json_sorted

DISTRIBUTION = "spine-model-tools"


def get_version() -> str:
    """Get the spine-model-tools package version string.

    Returns:
    -------
    str
        Version string, or "0.0.0-dev" if not installed.
    """
    return _package_version(DISTRIBUTION) or "0.0.0-dev"


def get_version_info() -> dict[str, object]:
    """Get detailed version information.

    Returns:
    -------
    dict[str, object]
        Structured version payload.
    """
    return {
        DISTRIBUTION: get_version(),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "dependencies": {
            "cyclopts": _package_version("cyclopts"),
            "msgspec": _package_version("msgspec"),
            "rich": _package_version("rich"),
        },
    }


def version_command() -> int:
    """Show version and dependency information.

    Returns:
    -------
    int
        Exit status code.
    """
    payload = dumps_json_sorted(get_version_info(), pretty=True).decode("utf-8")
    sys.stdout.write(payload + "\n")
    return 0


def _package_version(name: str) -> str | None:
    try:
        return pkg_version(name)
    except PackageNotFoundError:
        return None


__all__ = ["get_version", "get_version_info", "version_command"]
