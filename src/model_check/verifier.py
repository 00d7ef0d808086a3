"""Verification pass over the persisted command-receiver model."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from model_assemble.facts import FactSet
from model_assemble.store import ModelStore
from model_check.classpath import ProjectModule, assemble_classpath, normalize_classpath
from model_check.conflicts import ConflictChecker, ModelVerdict
from model_check.loaders import SourceTypeLoader, TypeLoader
from model_check.resolver import Resolver

logger = logging.getLogger(__name__)


class ModelVerifier:
    """Resolve recorded command receivers and reject conflicting handlers.

    Parameters
    ----------
    loader
        Type-loading capability.
    classpath
        Ordered locations the loader resolves names against.
    """

    def __init__(self, loader: TypeLoader, classpath: Sequence[Path] = ()) -> None:
        self._resolver = Resolver(loader)
        self._checker = ConflictChecker()
        self.classpath = normalize_classpath(classpath)

    @classmethod
    def for_project(
        cls,
        root: ProjectModule,
        loader: TypeLoader | None = None,
    ) -> ModelVerifier:
        """Create a verifier whose classpath spans every module of ``root``.

        Returns
        -------
        ModelVerifier
            Verifier over the assembled classpath.
        """
        return cls(loader if loader is not None else SourceTypeLoader(), assemble_classpath(root))

    def verify(self, fact_set: FactSet) -> ModelVerdict:
        """Verify the command receivers in ``fact_set``.

        Returns
        -------
        ModelVerdict
            Successful verdict; unresolved names are listed but tolerated.
        """
        logger.debug("Verifying %d command receivers.", len(fact_set))
        resolution = self._resolver.resolve(fact_set, self.classpath)
        verdict = self._checker.check(resolution.resolved, unresolved=resolution.unresolved)
        verdict.raise_for_errors()
        logger.info(
            "Model check passed: %d receivers, %d message kinds.",
            len(resolution.resolved),
            verdict.group_count,
        )
        return verdict

    def verify_store(self, store: ModelStore) -> ModelVerdict | None:
        """Verify the model persisted in ``store``.

        Returns
        -------
        ModelVerdict | None
            Verdict, or None when no model has been assembled yet.
        """
        if not store.exists():
            logger.warning("No model definition found under `%s`.", store.path)
            return None
        return self.verify(store.read())


__all__ = ["ModelVerifier"]
