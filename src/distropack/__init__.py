"""
distropack: command-line client for the DistroPack package-build service.

The package is organized into specialized modules:
- config: Configuration resolution and the persisted config file
- models: Wire and configuration data structures
- validation: Exceptions, input validation and error handling
- api: Async HTTP client for the build service
- orchestration: Build triggering and job status polling
- cli: Command-line interface

Usage:
    From command line:
        distropack-cli build --package-id 42 --version 1.2.3

    Programmatically:
        from distropack import ApiClient, BuildOrchestrator
        async with ApiClient.from_config() as client:
            await BuildOrchestrator(client).run("42", "1.2.3")
"""

__version__ = "0.1.0"

# Main interfaces
from .api import ApiClient
from .orchestration import BuildOrchestrator
from .cli import main_cli
from .config import get_config, resolve_base_url, resolve_token

# Model classes for external use
from .models import (
    BuildOutcome,
    BuildStatusResponse,
    CliConfig,
    JobState,
    JobStatus,
)

# Errors
from .validation import (
    BuildFailedError,
    BuildTimeoutError,
    ConfigMissingError,
    DistroPackError,
    NoJobsCreatedError,
    RemoteError,
    RemoteRejectedError,
    RemoteTransportError,
    SourceFileNotFoundError,
    ValidationError,
)

__all__ = [
    # Main interfaces
    "ApiClient",
    "BuildOrchestrator",
    "main_cli",
    "get_config",
    "resolve_token",
    "resolve_base_url",
    # Models
    "BuildOutcome",
    "BuildStatusResponse",
    "CliConfig",
    "JobState",
    "JobStatus",
    # Errors
    "DistroPackError",
    "ValidationError",
    "ConfigMissingError",
    "SourceFileNotFoundError",
    "RemoteError",
    "RemoteRejectedError",
    "RemoteTransportError",
    "NoJobsCreatedError",
    "BuildFailedError",
    "BuildTimeoutError",
]
