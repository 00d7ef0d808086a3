"""Exit code taxonomy for the spine-model CLI."""

from __future__ import annotations

from enum import IntEnum

from model_errors import ModelCheckError, ModelError, StoreCorruptionError, StoreIOError


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success
    - 1-9: General errors (parse, validation, config)
    - 10-19: Model store and model check errors
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    CONFIG_ERROR = 4

    # Model errors (10-19)
    STORE_CORRUPTION = StoreCorruptionError.exit_code
    STORE_IO_ERROR = StoreIOError.exit_code
    MODEL_CONFLICT = ModelCheckError.exit_code

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        if isinstance(exc, ModelError):
            try:
                return cls(exc.exit_code)
            except ValueError:
                return cls.GENERAL_ERROR

        cyclopts_code = _exit_code_for_cyclopts(exc)
        if cyclopts_code is not None:
            return cyclopts_code

        type_code = _exit_code_for_exception_type(exc)
        if type_code is not None:
            return type_code

        return cls.GENERAL_ERROR


def _exit_code_for_cyclopts(exc: BaseException) -> ExitCode | None:
    module = exc.__class__.__module__
    if not module.startswith("cyclopts"):
        return None
    if exc.__class__.__name__ == "ValidationError":
        return ExitCode.VALIDATION_ERROR
    return ExitCode.PARSE_ERROR


def _exit_code_for_exception_type(exc: BaseException) -> ExitCode | None:
    if isinstance(exc, (FileNotFoundError, FileExistsError, PermissionError)):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, (ValueError, TypeError)):
        return ExitCode.VALIDATION_ERROR
    return None


__all__ = ["ExitCode"]
