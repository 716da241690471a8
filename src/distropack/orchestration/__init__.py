"""
Build orchestration: trigger a build and follow its jobs to completion.
"""

from .build_runner import DEFAULT_POLL_INTERVAL, BuildOrchestrator
from .status_tracker import HEARTBEAT_EVERY, JobStatusTracker, is_heartbeat

__all__ = [
    "BuildOrchestrator",
    "DEFAULT_POLL_INTERVAL",
    "JobStatusTracker",
    "HEARTBEAT_EVERY",
    "is_heartbeat",
]
