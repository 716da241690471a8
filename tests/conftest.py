"""
Pytest configuration and shared fixtures for the distropack test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """
    Point the configuration layer at a throwaway file and clear the
    environment variables that would override it.
    """
    from distropack.config import (
        BASE_URL_ENV_VAR,
        CONFIG_PATH_ENV_VAR,
        TOKEN_ENV_VAR,
        set_config_path,
    )

    for name in (TOKEN_ENV_VAR, BASE_URL_ENV_VAR, CONFIG_PATH_ENV_VAR):
        monkeypatch.delenv(name, raising=False)

    config_path = temp_dir / "distropack" / "config.toml"
    set_config_path(config_path)

    yield config_path

    set_config_path(None)


@pytest.fixture
def write_config(isolated_config):
    """Write a config.toml with the given keys into the isolated location."""
    import toml

    def _write(**values: str) -> Path:
        isolated_config.parent.mkdir(parents=True, exist_ok=True)
        with open(isolated_config, "w") as f:
            toml.dump(values, f)
        return isolated_config

    return _write


@pytest.fixture
def valid_token():
    """A token that passes the format check."""
    return "dp_live_0123456789abcdefWXYZ"


# ============================================================================
# Test Utilities
# ============================================================================


class TestUtils:
    """Utility functions for testing."""

    @staticmethod
    def job_payload(
        job_id: str,
        status: str,
        name: Optional[str] = None,
        fail_message: Optional[str] = None,
        technical_error: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a job entry as the status endpoint returns it."""
        return {
            "jobId": job_id,
            "status": status,
            "name": name or f"job-{job_id}",
            "failMessage": fail_message,
            "technicalError": technical_error,
        }

    @staticmethod
    def status_payload(
        jobs: List[Dict[str, Any]], all_finished: bool = False, any_failed: bool = False
    ) -> Dict[str, Any]:
        """Create a build status document."""
        return {"jobs": jobs, "allFinished": all_finished, "anyFailed": any_failed}

    @staticmethod
    def status_response(jobs, all_finished: bool = False, any_failed: bool = False):
        """Create a parsed BuildStatusResponse from (job_id, status, ...) tuples."""
        from distropack.models import BuildStatusResponse, JobStatus

        return BuildStatusResponse(
            jobs=[JobStatus(job[0], job[1], f"job-{job[0]}", *job[2:]) for job in jobs],
            all_finished=all_finished,
            any_failed=any_failed,
        )

    @staticmethod
    def mock_client(job_ids: List[str], statuses: List[Any]) -> Mock:
        """Mock ApiClient whose trigger returns job_ids and whose polls return statuses in order."""
        client = Mock()
        client.trigger_build = AsyncMock(return_value=job_ids)
        client.query_status = AsyncMock(side_effect=statuses)
        return client


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils
