"""Resolve assembled command receivers and detect conflicting handlers."""

from model_check.classpath import ProjectModule, assemble_classpath, normalize_classpath
from model_check.conflicts import (
    ConflictChecker,
    DuplicateHandlerConflict,
    MalformedHandler,
    MalformedReason,
    ModelVerdict,
    group_by_message_kind,
)
from model_check.descriptors import HandlerMethod, ResolvedType
from model_check.loaders import SourceTypeLoader, TypeLoader, TypeRegistry
from model_check.resolver import Resolution, Resolver
from model_check.verifier import ModelVerifier

__all__ = [
    "ConflictChecker",
    "DuplicateHandlerConflict",
    "HandlerMethod",
    "MalformedHandler",
    "MalformedReason",
    "ModelVerdict",
    "ModelVerifier",
    "ProjectModule",
    "Resolution",
    "ResolvedType",
    "Resolver",
    "SourceTypeLoader",
    "TypeLoader",
    "TypeRegistry",
    "assemble_classpath",
    "group_by_message_kind",
    "normalize_classpath",
]
