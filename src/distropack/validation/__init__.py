"""
Validation and error handling for the distropack package.

This module provides the domain exception hierarchy, input validation and
error handling with consistent error reporting across the application.
"""

from .exceptions import (
    BuildFailedError,
    BuildTimeoutError,
    ConfigFileError,
    ConfigMissingError,
    DistroPackError,
    ErrorSeverity,
    NoJobsCreatedError,
    RemoteError,
    RemoteRejectedError,
    RemoteTransportError,
    SourceFileNotFoundError,
    SourceFileReadError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_remote_error,
)

from .validators import (
    BUILD_TARGETS,
    is_valid_token_format,
    validate_base_url,
    validate_build_target,
    validate_enum_choice,
    validate_non_empty,
    validate_package_id,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "DistroPackError",
    "ValidationError",
    "ConfigMissingError",
    "ConfigFileError",
    "SourceFileNotFoundError",
    "SourceFileReadError",
    "RemoteError",
    "RemoteTransportError",
    "RemoteRejectedError",
    "NoJobsCreatedError",
    "BuildFailedError",
    "BuildTimeoutError",
    # Error handling
    "ErrorSeverity",
    "handle_error",
    "handle_config_error",
    "handle_remote_error",
    "handle_cli_error",
    # Validators
    "BUILD_TARGETS",
    "is_valid_token_format",
    "validate_base_url",
    "validate_build_target",
    "validate_enum_choice",
    "validate_non_empty",
    "validate_package_id",
    "validate_positive_float",
    "validate_positive_integer",
]
