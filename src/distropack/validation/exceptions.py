"""
Exception hierarchy and error handling helpers.

This module defines the domain errors raised across the CLI and the small set
of helpers used to log them consistently and turn them into exit codes.
"""

import logging
import sys
from enum import Enum
from typing import Any, List, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class DistroPackError(Exception):
    """Base class for every error raised by distropack."""


class ValidationError(DistroPackError):
    """
    Exception raised when validation of a user-supplied value fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ConfigMissingError(DistroPackError):
    """Raised when no API token can be resolved."""


class ConfigFileError(DistroPackError):
    """Raised when the persisted configuration file cannot be read or written."""


class SourceFileNotFoundError(DistroPackError, FileNotFoundError):
    """Raised when the file to upload does not exist."""


class SourceFileReadError(DistroPackError, OSError):
    """Raised when the file to upload exists but cannot be read."""


class RemoteError(DistroPackError):
    """Base class for failures talking to the build service."""


class RemoteTransportError(RemoteError):
    """
    The request never produced a usable response.

    Covers connection failures, timeouts and response bodies that could not
    be decoded into the expected shape.
    """


class RemoteRejectedError(RemoteError):
    """The service answered with a non-success HTTP status."""

    def __init__(self, operation: str, status_code: int, body: str):
        super().__init__(f"{operation} failed with status {status_code}: {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body


class NoJobsCreatedError(DistroPackError):
    """Raised when a build trigger returns an empty job list."""


class BuildFailedError(DistroPackError):
    """Raised once every job is finished and at least one of them failed."""

    def __init__(self, failed_jobs: List[Any], total_jobs: int):
        super().__init__(f"{len(failed_jobs)} of {total_jobs} build job(s) failed")
        self.failed_jobs = failed_jobs
        self.total_jobs = total_jobs


class BuildTimeoutError(DistroPackError):
    """Raised when a build does not reach a terminal state before the deadline."""

    def __init__(self, timeout: float, pending_job_ids: List[str]):
        super().__init__(
            f"Build did not finish within {timeout:g}s "
            f"({len(pending_job_ids)} job(s) still pending)"
        )
        self.timeout = timeout
        self.pending_job_ids = pending_job_ids


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_remote_error(error: Exception, operation: str, **kwargs) -> None:
    """Handle errors raised while talking to the build service."""
    handle_error(error, f"remote {operation}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """
    Report an error to the user and exit the process.

    The message goes to stderr without a traceback. The log record carries
    the context and is only visible with verbose logging, unless
    ``include_traceback`` is set for unexpected errors.
    """
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)
    severity = kwargs.pop('severity', ErrorSeverity.DEBUG)

    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    print(f"Error: {error}", file=sys.stderr)
    sys.exit(exit_code)
