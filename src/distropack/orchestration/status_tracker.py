"""
Per-job status transition tracking for readable progress output.
"""

import logging
from typing import Dict, Optional

from ..models.build import JobState, JobStatus, TERMINAL_STATES

logger = logging.getLogger(__name__)

# Running jobs and missing jobs are re-announced every N polls.
HEARTBEAT_EVERY = 3


def is_heartbeat(iteration: int) -> bool:
    return iteration % HEARTBEAT_EVERY == 0


class JobStatusTracker:
    """
    Remembers the last status seen for each job and decides which
    status lines are worth printing.

    One tracker belongs to one orchestration run and is discarded with it.
    """

    def __init__(self):
        self._seen: Dict[str, str] = {}

    def last_seen(self, job_id: str) -> Optional[str]:
        return self._seen.get(job_id)

    def observe(self, job: JobStatus, iteration: int) -> Optional[str]:
        """
        Record a job snapshot and return the line to print, if any.

        A job never seen before counts as changed. ``running`` is repeated
        on heartbeat iterations; ``finished`` and ``failed`` are printed
        only on the transition into them. Other statuses print nothing.
        """
        previous = self._seen.get(job.job_id)
        changed = previous != job.status

        if changed and previous in TERMINAL_STATES:
            logger.warning(
                f"Job {job.name} ({job.job_id}) went from '{previous}' back to "
                f"'{job.status}'; reporting the new status"
            )

        self._seen[job.job_id] = job.status

        state = job.state
        if state is JobState.RUNNING:
            if changed or is_heartbeat(iteration):
                return f"  [running]  {job.name} is building..."
        elif state is JobState.FINISHED:
            if changed:
                return f"  [finished] {job.name} completed"
        elif state is JobState.FAILED:
            if changed:
                if job.fail_message is not None:
                    return f"  [failed]   {job.name} failed: {job.fail_message}"
                return f"  [failed]   {job.name} failed"
        elif state is None and changed:
            logger.debug(f"Job {job.job_id} reported unrecognized status '{job.status}'")
        return None
