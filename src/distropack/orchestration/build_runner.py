"""
Build triggering and status polling.

This module provides the BuildOrchestrator, which triggers a build on the
remote service and then polls the status of every created job until all of
them reach a terminal state. Progress is printed as jobs change state, and
the final decision (success, failed jobs, timeout) is turned into a return
value or a domain exception for the CLI to map onto an exit code.
"""

import asyncio
import logging
import sys
from typing import List, Optional, TextIO, Tuple

from ..api.client import ApiClient
from ..models.build import BuildOutcome, BuildStatusResponse, JobStatus
from ..validation import (
    BuildFailedError,
    BuildTimeoutError,
    NoJobsCreatedError,
)
from .status_tracker import JobStatusTracker, is_heartbeat

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


class BuildOrchestrator:
    """
    Drives one build from trigger to terminal state.

    The loop is strictly sequential: one batched status query per tick,
    followed by a sleep of ``poll_interval`` seconds. Without a ``timeout``
    it keeps polling until the service reports every job finished.
    """

    def __init__(
        self,
        client: ApiClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        """
        Args:
            client: API client used for trigger and status calls
            poll_interval: Seconds to sleep between status polls
            timeout: Optional overall deadline for polling, in seconds
            out: Stream for progress output (defaults to stdout)
            err: Stream for failure details (defaults to stderr)
        """
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._out = out
        self._err = err

    def _print(self, message: str) -> None:
        print(message, file=self._out or sys.stdout, flush=True)

    def _print_error(self, message: str) -> None:
        print(message, file=self._err or sys.stderr, flush=True)

    async def run(
        self,
        package_id: str,
        version: str,
        target: Optional[str] = None,
        wait: bool = True,
    ) -> BuildOutcome:
        """
        Trigger a build and, unless ``wait`` is False, follow it to completion.

        Returns:
            BuildOutcome describing the successful build

        Raises:
            NoJobsCreatedError: If the service created no jobs
            BuildFailedError: If all jobs finished and at least one failed
            BuildTimeoutError: If ``timeout`` elapsed before completion
            RemoteError: If any remote call fails
        """
        if target is not None:
            self._print(f"Triggering build for package {package_id} version {version} (target: {target})...")
        else:
            self._print(f"Triggering build for package {package_id} version {version} (all targets)...")

        job_ids = await self.client.trigger_build(package_id, version, target)
        if not job_ids:
            raise NoJobsCreatedError(
                f"No build jobs were created for package {package_id} version {version}"
            )

        self._print(
            f"Build triggered successfully for package {package_id} "
            f"version {version} ({len(job_ids)} job(s))"
        )
        if not wait:
            return BuildOutcome(job_ids=job_ids)

        final_status, polls = await self.wait_for_jobs(job_ids)
        return BuildOutcome(job_ids=job_ids, final_status=final_status, polls=polls)

    async def wait_for_jobs(self, job_ids: List[str]) -> Tuple[BuildStatusResponse, int]:
        """
        Poll job status until the service reports every job finished.

        Returns:
            The final status response and the number of polls made

        Raises:
            BuildFailedError: If any job failed
            BuildTimeoutError: If the deadline passed first
        """
        tracker = JobStatusTracker()
        iteration = 0
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout if self.timeout is not None else None

        self._print(f"Waiting for {len(job_ids)} job(s) to finish...")

        while True:
            status = await self.client.query_status(job_ids)
            logger.debug(
                f"Poll {iteration}: {len(status.jobs)} job(s) reported, "
                f"all_finished={status.all_finished}, any_failed={status.any_failed}"
            )

            for job in status.jobs:
                line = tracker.observe(job, iteration)
                if line is not None:
                    self._print(line)

            missing = status.missing_job_ids(job_ids)
            if missing and is_heartbeat(iteration):
                self._print(f"  {len(missing)} job(s) still initializing...")

            if status.all_finished:
                if status.any_failed:
                    failed = status.failed_jobs()
                    self._report_failures(failed)
                    raise BuildFailedError(failed, len(job_ids))
                self._print(f"All {len(job_ids)} build job(s) completed successfully!")
                return status, iteration + 1

            delay = self.poll_interval
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    terminal = {job.job_id for job in status.jobs if job.is_terminal}
                    pending = [job_id for job_id in job_ids if job_id not in terminal]
                    raise BuildTimeoutError(self.timeout, pending)
                delay = min(delay, remaining)

            iteration += 1
            await asyncio.sleep(delay)

    def _report_failures(self, failed_jobs: List[JobStatus]) -> None:
        for job in failed_jobs:
            self._print_error(f"Build failed for {job.name} ({job.job_id})")
            if job.fail_message is not None:
                self._print_error(f"  Error: {job.fail_message}")
            if job.technical_error is not None:
                self._print_error(f"  Technical details: {job.technical_error}")
