"""
Unit tests for BuildOrchestrator.

The API client is replaced with AsyncMocks that return a scripted sequence
of status responses; output streams are captured with StringIO.
"""

import io
from unittest.mock import AsyncMock, patch

import pytest

from distropack.orchestration import BuildOrchestrator
from distropack.validation import (
    BuildFailedError,
    BuildTimeoutError,
    NoJobsCreatedError,
    RemoteRejectedError,
    RemoteTransportError,
)


def make_orchestrator(client, **kwargs):
    out = io.StringIO()
    err = io.StringIO()
    kwargs.setdefault("poll_interval", 0)
    orchestrator = BuildOrchestrator(client, out=out, err=err, **kwargs)
    return orchestrator, out, err


@pytest.mark.unit
@pytest.mark.asyncio
class TestTrigger:
    """Test cases for the trigger phase."""

    async def test_no_jobs_created_never_polls(self, test_utils):
        client = test_utils.mock_client([], [])
        orchestrator, out, _ = make_orchestrator(client)

        with pytest.raises(NoJobsCreatedError):
            await orchestrator.run("42", "1.0.0")

        client.trigger_build.assert_awaited_once_with("42", "1.0.0", None)
        client.query_status.assert_not_called()

    async def test_target_is_forwarded(self, test_utils):
        done = test_utils.status_response([("a", "finished")], all_finished=True)
        client = test_utils.mock_client(["a"], [done])
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0", target="deb")

        client.trigger_build.assert_awaited_once_with("42", "1.0.0", "deb")
        assert "(target: deb)" in out.getvalue()

    async def test_no_wait_returns_after_trigger(self, test_utils):
        client = test_utils.mock_client(["a", "b"], [])
        orchestrator, out, _ = make_orchestrator(client)

        outcome = await orchestrator.run("42", "1.0.0", wait=False)

        assert outcome.job_ids == ["a", "b"]
        assert outcome.final_status is None
        assert outcome.polls == 0
        client.query_status.assert_not_called()
        assert "(2 job(s))" in out.getvalue()

    async def test_trigger_error_propagates(self, test_utils):
        client = test_utils.mock_client([], [])
        client.trigger_build = AsyncMock(side_effect=RemoteRejectedError("Build request", 404, "no such package"))
        orchestrator, _, _ = make_orchestrator(client)

        with pytest.raises(RemoteRejectedError):
            await orchestrator.run("42", "1.0.0")

        client.query_status.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
class TestPolling:
    """Test cases for the poll loop output and terminal decisions."""

    async def test_success_summary_printed_once(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "running"), ("b", "pending")]),
            test_utils.status_response([("a", "finished"), ("b", "running")]),
            test_utils.status_response([("a", "finished"), ("b", "finished")], all_finished=True),
        ]
        client = test_utils.mock_client(["a", "b"], statuses)
        orchestrator, out, err = make_orchestrator(client)

        outcome = await orchestrator.run("42", "1.0.0")

        output = out.getvalue()
        assert output.count("completed successfully") == 1
        assert output.count("job-a completed") == 1
        assert output.count("job-b completed") == 1
        assert err.getvalue() == ""
        assert outcome.polls == 3
        assert outcome.final_status is statuses[-1]
        assert client.query_status.await_count == 3
        client.query_status.assert_awaited_with(["a", "b"])

    async def test_unchanged_running_not_repeated(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "running")]),
            test_utils.status_response([("a", "running")]),
            test_utils.status_response([("a", "finished")], all_finished=True),
        ]
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0")

        assert out.getvalue().count("job-a is building") == 1

    async def test_running_heartbeat_every_third_poll(self, test_utils):
        statuses = [test_utils.status_response([("a", "running")]) for _ in range(5)]
        statuses.append(test_utils.status_response([("a", "finished")], all_finished=True))
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0")

        # iteration 0 (first sighting) and iteration 3 (heartbeat)
        assert out.getvalue().count("job-a is building") == 2

    async def test_missing_jobs_reported_as_initializing(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "running")]),
            test_utils.status_response([("a", "running"), ("b", "running")]),
            test_utils.status_response([("a", "finished"), ("b", "finished")], all_finished=True),
        ]
        client = test_utils.mock_client(["a", "b"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0")

        output = out.getvalue()
        assert output.count("1 job(s) still initializing") == 1
        assert "job-b is building" in output

    async def test_missing_jobs_only_reported_on_heartbeat(self, test_utils):
        statuses = [test_utils.status_response([("a", "running")]) for _ in range(4)]
        statuses.append(
            test_utils.status_response([("a", "finished"), ("b", "finished")], all_finished=True)
        )
        client = test_utils.mock_client(["a", "b"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0")

        assert out.getvalue().count("still initializing") == 2

    async def test_failed_jobs_reported_to_error_stream(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "running"), ("b", "running"), ("c", "running")]),
            test_utils.status_response(
                [
                    ("a", "finished"),
                    ("b", "failed", "Dependency libfoo not found", "apt exited with code 100"),
                    ("c", "failed"),
                ],
                all_finished=True,
                any_failed=True,
            ),
        ]
        client = test_utils.mock_client(["a", "b", "c"], statuses)
        orchestrator, out, err = make_orchestrator(client)

        with pytest.raises(BuildFailedError) as exc_info:
            await orchestrator.run("42", "1.0.0")

        errors = err.getvalue()
        assert "Build failed for job-b (b)" in errors
        assert "Error: Dependency libfoo not found" in errors
        assert "Technical details: apt exited with code 100" in errors
        assert "Build failed for job-c (c)" in errors
        assert errors.count("Error:") == 1
        assert errors.count("Technical details:") == 1
        assert "job-a" not in errors
        assert "completed successfully" not in out.getvalue()
        assert [job.job_id for job in exc_info.value.failed_jobs] == ["b", "c"]
        assert exc_info.value.total_jobs == 3

    async def test_empty_fail_message_still_printed(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "failed", "")], all_finished=True, any_failed=True),
        ]
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, _, err = make_orchestrator(client)

        with pytest.raises(BuildFailedError):
            await orchestrator.run("42", "1.0.0")

        assert "  Error: \n" in err.getvalue()

    async def test_failure_does_not_stop_polling_before_all_finished(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "failed", "boom"), ("b", "running")], any_failed=True),
            test_utils.status_response([("a", "failed", "boom"), ("b", "running")], any_failed=True),
            test_utils.status_response(
                [("a", "failed", "boom"), ("b", "finished")], all_finished=True, any_failed=True
            ),
        ]
        client = test_utils.mock_client(["a", "b"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        with pytest.raises(BuildFailedError):
            await orchestrator.run("42", "1.0.0")

        assert client.query_status.await_count == 3
        assert out.getvalue().count("job-a failed: boom") == 1
        assert "job-b completed" in out.getvalue()

    async def test_status_regression_is_tolerated(self, test_utils, caplog):
        statuses = [
            test_utils.status_response([("a", "finished")]),
            test_utils.status_response([("a", "running")]),
            test_utils.status_response([("a", "finished")], all_finished=True),
        ]
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, out, _ = make_orchestrator(client)

        await orchestrator.run("42", "1.0.0")

        assert "went from 'finished' back to 'running'" in caplog.text
        assert out.getvalue().count("job-a completed") == 2

    async def test_poll_error_aborts(self, test_utils):
        client = test_utils.mock_client(
            ["a"],
            [
                test_utils.status_response([("a", "running")]),
                RemoteTransportError("Failed to send status check: connection reset"),
            ],
        )
        orchestrator, _, _ = make_orchestrator(client)

        with pytest.raises(RemoteTransportError):
            await orchestrator.run("42", "1.0.0")

        assert client.query_status.await_count == 2

    async def test_sleeps_poll_interval_between_polls(self, test_utils):
        statuses = [
            test_utils.status_response([("a", "running")]),
            test_utils.status_response([("a", "finished")], all_finished=True),
        ]
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, _, _ = make_orchestrator(client, poll_interval=5.0)

        with patch("distropack.orchestration.build_runner.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await orchestrator.run("42", "1.0.0")

        mock_sleep.assert_awaited_once_with(5.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestTimeout:
    """Test cases for the optional polling deadline."""

    async def test_deadline_exceeded(self, test_utils):
        statuses = [test_utils.status_response([("a", "finished"), ("b", "running")])]
        client = test_utils.mock_client(["a", "b", "c"], statuses)
        orchestrator, _, _ = make_orchestrator(client, timeout=0.0)

        with pytest.raises(BuildTimeoutError) as exc_info:
            await orchestrator.run("42", "1.0.0")

        assert exc_info.value.pending_job_ids == ["b", "c"]
        assert client.query_status.await_count == 1

    async def test_completion_before_deadline(self, test_utils):
        statuses = [test_utils.status_response([("a", "finished")], all_finished=True)]
        client = test_utils.mock_client(["a"], statuses)
        orchestrator, out, _ = make_orchestrator(client, timeout=0.0)

        outcome = await orchestrator.run("42", "1.0.0")

        assert outcome.polls == 1
        assert "completed successfully" in out.getvalue()
