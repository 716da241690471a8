"""
Build and job status data models.

These records mirror the JSON documents returned by the build service. They
are parsed strictly: a document missing a required key, or carrying a value
of the wrong type, raises ``ValueError`` so the client can report it as a
malformed response instead of failing later inside the polling loop.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class JobState(str, Enum):
    """Job states reported by the service."""

    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str) -> Optional["JobState"]:
        """Map a wire status to a member, or None for values this client does not know."""
        try:
            return cls(value)
        except ValueError:
            return None


TERMINAL_STATES = frozenset({JobState.FINISHED.value, JobState.FAILED.value})


def _require(data: Dict[str, Any], key: str, expected: type, document: str) -> Any:
    if key not in data:
        raise ValueError(f"{document} is missing required field '{key}'")
    value = data[key]
    if not isinstance(value, expected):
        raise ValueError(
            f"{document} field '{key}' must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _optional_str(data: Dict[str, Any], key: str, document: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{document} field '{key}' must be a string or null")
    return value


def _require_object(data: Any, document: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{document} must be a JSON object")
    return data


@dataclass(frozen=True)
class JobStatus:
    """
    Snapshot of one build job as reported by a single status poll.

    ``fail_message`` and ``technical_error`` keep None (absent) distinct from
    an empty string.
    """

    job_id: str
    status: str
    name: str
    fail_message: Optional[str] = None
    technical_error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "JobStatus":
        data = _require_object(data, "job status")
        return cls(
            job_id=_require(data, "jobId", str, "job status"),
            status=_require(data, "status", str, "job status"),
            name=_require(data, "name", str, "job status"),
            fail_message=_optional_str(data, "failMessage", "job status"),
            technical_error=_optional_str(data, "technicalError", "job status"),
        )

    @property
    def state(self) -> Optional[JobState]:
        return JobState.parse(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES


@dataclass
class BuildStatusResponse:
    """
    Result of one status poll covering every requested job.
    """

    jobs: List[JobStatus] = field(default_factory=list)
    all_finished: bool = False
    any_failed: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "BuildStatusResponse":
        data = _require_object(data, "build status response")
        jobs = _require(data, "jobs", list, "build status response")
        return cls(
            jobs=[JobStatus.from_dict(job) for job in jobs],
            all_finished=_require(data, "allFinished", bool, "build status response"),
            any_failed=_require(data, "anyFailed", bool, "build status response"),
        )

    def get(self, job_id: str) -> Optional[JobStatus]:
        for job in self.jobs:
            if job.job_id == job_id:
                return job
        return None

    def failed_jobs(self) -> List[JobStatus]:
        return [job for job in self.jobs if job.status == JobState.FAILED.value]

    def missing_job_ids(self, requested: List[str]) -> List[str]:
        """Requested ids the service did not report yet."""
        reported = {job.job_id for job in self.jobs}
        return [job_id for job_id in requested if job_id not in reported]


@dataclass
class BuildTriggerResponse:
    """Job ids created by a build request."""

    job_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "BuildTriggerResponse":
        data = _require_object(data, "build response")
        job_ids = _require(data, "jobIds", list, "build response")
        if not all(isinstance(job_id, str) for job_id in job_ids):
            raise ValueError("build response field 'jobIds' must contain only strings")
        return cls(job_ids=list(job_ids))


@dataclass
class BuildOutcome:
    """
    Summary returned by a successful orchestration run.

    ``final_status`` is None when the run did not wait for completion.
    """

    job_ids: List[str]
    final_status: Optional[BuildStatusResponse] = None
    polls: int = 0
