"""
Custom exceptions for the varejo data generator.

This module contains specialized exception classes for sink writes, stage
preconditions, pipeline control flow and configuration loading.
"""

from pathlib import Path
from typing import Any


class VarejoDataGenException(Exception):
    """Base exception for all varejo data generator errors."""

    pass


class SinkError(VarejoDataGenException):
    """Exception raised when a single sink call fails."""

    def __init__(
        self,
        message: str,
        sink: str | None = None,
        table: str | None = None,
        key: Any | None = None,
        original_error: Exception | None = None,
    ):
        self.sink = sink
        self.table = table
        self.key = key
        self.original_error = original_error

        error_parts = [message]

        if sink:
            error_parts.append(f"Sink: {sink}")

        if table:
            error_parts.append(f"Table: {table}")

        if key is not None:
            error_parts.append(f"Key: {key}")

        if original_error:
            error_parts.append(f"Original error: {original_error}")

        super().__init__(" | ".join(error_parts))


class StagePreconditionError(VarejoDataGenException):
    """Exception raised when a stage cannot start because a precondition failed."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        precondition: str | None = None,
        original_error: Exception | None = None,
    ):
        self.stage = stage
        self.precondition = precondition
        self.original_error = original_error

        if stage:
            message = f"Stage '{stage}' precondition failed: {message}"

        if precondition:
            message = f"{message} (precondition: {precondition})"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)


class AddressPoolError(StagePreconditionError):
    """Exception raised when positional address assignment would overflow the pool."""

    def __init__(self, stage: str, required: int, available: int):
        self.required = required
        self.available = available

        super().__init__(
            f"needs {required} addresses but only {available} were generated",
            stage=stage,
            precondition="address pool bounds",
        )


class StageFailedError(VarejoDataGenException):
    """Exception raised when a pipeline stage aborts."""

    def __init__(self, stage: str, cause: BaseException | None = None):
        self.stage = stage
        self.cause = cause

        message = f"Stage '{stage}' failed"
        if cause is not None:
            message = f"{message}: {cause}"

        super().__init__(message)


class PipelineCancelledError(VarejoDataGenException):
    """Exception raised when the pipeline is cancelled externally."""

    def __init__(self, stage: str | None = None):
        self.stage = stage

        message = "Pipeline cancelled"
        if stage:
            message = f"{message} during stage '{stage}'"

        super().__init__(message)


class ConfigurationError(VarejoDataGenException):
    """Exception raised when configuration cannot be loaded or is invalid."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.file_path = file_path
        self.original_error = original_error

        if file_path:
            message = f"Error loading configuration '{file_path}': {message}"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)
