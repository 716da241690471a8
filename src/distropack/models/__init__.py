"""
Data models for the distropack CLI.

Configuration Models:
- Persisted CLI configuration and its resolved summary

Build Models:
- Job states and per-job status snapshots
- Build trigger and build status responses
- The outcome of an orchestrated build
"""

from .build import (
    BuildOutcome,
    BuildStatusResponse,
    BuildTriggerResponse,
    JobState,
    JobStatus,
    TERMINAL_STATES,
)
from .config import CliConfig, ConfigSummary

__all__ = [
    # Configuration
    "CliConfig",
    "ConfigSummary",
    # Build
    "BuildOutcome",
    "BuildStatusResponse",
    "BuildTriggerResponse",
    "JobState",
    "JobStatus",
    "TERMINAL_STATES",
]
