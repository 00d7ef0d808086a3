"""Structured return value of the model commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cli.exit_codes import ExitCode

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class CliResult:
    """Outcome of an ``assemble``, ``check`` or ``show`` run.

    ``paths`` names the files a run wrote, such as the model store, and
    ``counts`` holds the tallies printed under the summary.
    """

    exit_code: int
    summary: str | None = None
    paths: Mapping[str, Path] = field(default_factory=dict)
    counts: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        *,
        summary: str | None = None,
        paths: Mapping[str, Path] | None = None,
        counts: Mapping[str, int] | None = None,
    ) -> CliResult:
        """Return a result exiting with status 0."""
        return cls(
            exit_code=ExitCode.SUCCESS,
            summary=summary,
            paths=paths or {},
            counts=counts or {},
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> CliResult:
        """Return a failed result for a store or model-check error.

        The exit code follows :meth:`ExitCode.from_exception`, so store
        corruption, store I/O failures and handler conflicts stay
        distinguishable to callers.

        Returns
        -------
        CliResult
            Result carrying the error message as its summary.
        """
        return cls(exit_code=int(ExitCode.from_exception(exc)), summary=str(exc))

    @property
    def ok(self) -> bool:
        """Return True when the run succeeded."""
        return self.exit_code == ExitCode.SUCCESS


__all__ = ["CliResult"]
