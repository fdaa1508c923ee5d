"""
Shared Test Configuration and Fixtures

Fixtures used across jobs, upload, notify and core tests.

To run the tests:
    pip install -e ".[test]"
    pytest
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from jobs.implementations.memory_ledger import InMemoryJobLedger
from jobs.models.job_record import JobRecord
from notify.implementations.mock_notifier import MockNotifier
from upload.implementations.mock_host import MockVideoHost

# Fixed start time for deterministic scheduling tests
START_TIME = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock: call it for the current time, advance() to move on"""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


# =============================================================================
# JOB FIXTURES
# =============================================================================


@pytest.fixture
def clip_file(tmp_path) -> Path:
    """A small fake video file in the temp directory"""
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00" * 2048)
    return path


@pytest.fixture
def make_job(clip_file):
    """
    Factory for JobRecords pointing at a real temp file.

    Usage:
        def test_something(make_job):
            job = make_job(title="Ace", ping_channel=True)
    """
    counter = {"n": 0}

    def _make(**overrides) -> JobRecord:
        counter["n"] += 1
        fields = {
            "job_id": f"job-{counter['n']}",
            "discord_user_id": "111",
            "discord_username": "player",
            "title": "Clutch round",
            "target_channel": "999",
            "file_path": clip_file,
        }
        fields.update(overrides)
        return JobRecord(**fields)

    return _make


@pytest.fixture
def ledger():
    """Fresh in-memory ledger"""
    return InMemoryJobLedger()


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def mock_host():
    """Mock video host (processing completes on the first check)"""
    return MockVideoHost(simulate_timing=False)


@pytest.fixture
def mock_notifier():
    """Mock notifier that records every message"""
    return MockNotifier()


@pytest.fixture
def clock():
    """Fake clock starting at START_TIME"""
    return FakeClock()
