"""Standardized Error Handling Utilities

Provides the error hierarchy used across giftool and the helpers the image
service uses to turn low-level failures into a single reported error.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum


class ErrorLevel(Enum):
    """Error severity levels for consistent logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class GifToolError(Exception):
    """Base exception class for all giftool errors."""

    def __init__(
        self, message: str, cause: Exception | None = None, context: dict | None = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by: {self.cause})"
        return base_msg


class InvalidInputError(GifToolError):
    """Raised when image bytes are empty or not a GIF."""


class UnsupportedPlatformError(GifToolError):
    """Raised when the host OS has no matching gifsicle build."""


class DirectoryCreationError(GifToolError):
    """Raised when the working or cache directory cannot be created."""


class ToolNotFoundError(GifToolError):
    """Raised when no gifsicle binary can be located to bootstrap from."""


class ProcessExecutionError(GifToolError):
    """Raised when gifsicle cannot be launched or exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
        output: str = "",
        exit_status: int | None = None,
    ):
        super().__init__(message, cause=cause, context=context)
        self.output = output
        self.exit_status = exit_status


class ProcessTimeoutError(ProcessExecutionError):
    """Raised when gifsicle runs past its timeout and is killed."""


class UnparseableOutputError(GifToolError):
    """Raised when `gifsicle -I` output does not have the expected shape."""


class ImageOperationError(GifToolError):
    """Single error reported by the image service for a failed operation.

    The original failure is available as ``cause``; ``kind`` names its class.
    """

    @property
    def kind(self) -> str:
        if self.cause is None:
            return type(self).__name__
        return type(self.cause).__name__


def handle_error(
    error: Exception,
    operation: str,
    error_type: type[GifToolError] = ImageOperationError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
    reraise: bool = True,
) -> GifToolError | None:
    """Standardized error handling with consistent logging and error transformation.

    Args:
        error: Original exception that occurred
        operation: Description of operation that failed
        error_type: Type of GifToolError to raise
        level: Logging level for the error
        context: Additional context information
        logger: Logger to use (defaults to module logger)
        reraise: Whether to reraise the transformed exception

    Returns:
        The transformed error if reraise=False, otherwise None

    Raises:
        GifToolError: Transformed error if reraise=True
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    message = f"Failed to {operation}: {error}"

    error_context = dict(context or {})
    error_context.update(
        {
            "operation": operation,
            "original_error_type": type(error).__name__,
        }
    )

    transformed_error = error_type(message, cause=error, context=error_context)

    log_message = f"{operation.capitalize()} failed: {error}"
    context_str = ", ".join(f"{k}={v}" for k, v in error_context.items())
    if context_str:
        log_message += f" (context: {context_str})"

    log_func = getattr(logger, level.value)
    log_func(log_message)

    if level in (ErrorLevel.ERROR, ErrorLevel.CRITICAL):
        logger.debug(f"Traceback for {operation}: {traceback.format_exc()}")

    if reraise:
        raise transformed_error from error
    return transformed_error


@contextmanager
def error_context(
    operation: str,
    error_type: type[GifToolError] = ImageOperationError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> Iterator[None]:
    """Context manager that reports any failure inside it as *error_type*.

    Usage:
        with error_context("compress GIF", context={"colors": 64}):
            run_gifsicle()

    Errors that already are *error_type* pass through unchanged, so nested
    contexts do not wrap twice.
    """
    try:
        yield
    except error_type:
        raise
    except Exception as e:
        handle_error(e, operation, error_type, level, context, logger, reraise=True)
