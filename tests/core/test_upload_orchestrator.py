"""
Upload Orchestrator Tests

Tests for the job worker driven tick by tick with a fake clock:
- Upload, processing backoff and completion
- Failure handling (status, DM, temp file cleanup)
- Isolation between jobs
- Thread lifecycle

To run these tests:
    pytest tests/core/test_upload_orchestrator.py -v
"""

import time
from datetime import timedelta

import pytest

from core.upload_orchestrator import UploadOrchestrator
from jobs.constants import JobStatus
from notify.implementations.mock_notifier import MockNotifier
from upload.implementations.mock_host import MockVideoHost
from upload.interfaces.video_host_interface import (
    ProcessingCheckError,
    UploadCancelledError,
    UploadError,
)

# =============================================================================
# TEST FIXTURES
# =============================================================================


@pytest.fixture
def make_orchestrator(ledger, mock_host, mock_notifier, clock):
    """
    Build an orchestrator over the shared fixtures.

    Usage:
        orchestrator = make_orchestrator(video_host=MockVideoHost(...))
    """

    def _make(**overrides):
        kwargs = {
            "ledger": ledger,
            "video_host": mock_host,
            "notifier": mock_notifier,
            "tick_interval": 0.01,
            "max_processing_checks": None,
            "job_retention_hours": None,
            "clock": clock,
        }
        kwargs.update(overrides)
        return UploadOrchestrator(**kwargs)

    return _make


def _processing_job(make_job, clock, check_count=0):
    """A job already uploaded and waiting for YouTube processing"""
    job = make_job()
    job.mark_uploading()
    job.mark_processing("vid123", now=clock())
    job.processing_check_count = check_count
    return job


def _failure_dms(notifier):
    return [m for m in notifier.direct_messages if m.text.startswith("❌")]


# =============================================================================
# HAPPY PATH
# =============================================================================


@pytest.mark.unit
def test_queued_job_is_uploaded(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """
    Test the first tick for a queued job.

    Should:
    - DM the uploader that the upload started
    - Move the job to PROCESSING with the video id and timestamps
    - Keep the temp file until processing is done
    """
    job = make_job()
    ledger.add(job)

    make_orchestrator().run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.PROCESSING
    assert stored.youtube_video_id.startswith("mock_")
    assert stored.processing_started_at == clock()
    assert stored.last_processing_check_at == clock()
    assert stored.processing_check_count == 0
    assert stored.file_path.exists()

    assert len(mock_notifier.direct_messages) == 1
    assert mock_notifier.direct_messages[0].text == "🎬 Starting upload: **Clutch round**"


@pytest.mark.unit
def test_completes_on_first_check(
    make_orchestrator, ledger, mock_host, mock_notifier, make_job, clock,
):
    """
    Test a video that is ready at the first processing check.

    Should:
    - Not check before the 5s backoff elapsed
    - End COMPLETED with exactly one channel post containing the URL
    - Delete the temp file
    """
    job = make_job(publish_message="gg", ping_channel=True)
    ledger.add(job)
    orchestrator = make_orchestrator()

    orchestrator.run_tick()
    clock.advance(4)
    orchestrator.run_tick()
    assert mock_host.check_history == []

    clock.advance(1)
    orchestrator.run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.COMPLETED
    assert stored.completed_at == clock()
    assert stored.processing_check_count == 1
    assert not stored.file_path.exists()

    posts = mock_notifier.channel_messages
    assert len(posts) == 1
    assert posts[0].target_id == "999"
    assert posts[0].ping_all is True
    assert posts[0].text.startswith("@here\n<@111> : gg")
    assert posts[0].text.endswith(f"https://www.youtube.com/watch?v={stored.youtube_video_id}")
    assert _failure_dms(mock_notifier) == []


@pytest.mark.unit
def test_completed_job_not_processed_again(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """Test a completed job produces no further posts on later ticks"""
    ledger.add(_processing_job(make_job, clock))
    orchestrator = make_orchestrator()

    clock.advance(5)
    orchestrator.run_tick()
    for _ in range(3):
        clock.advance(60)
        orchestrator.run_tick()

    assert len(mock_notifier.channel_messages) == 1


# =============================================================================
# BACKOFF
# =============================================================================


@pytest.mark.unit
def test_backoff_at_third_check(make_orchestrator, ledger, make_job, clock):
    """
    Test the wait after three checks is 40s.

    Should:
    - Not check at 39s
    - Check at 41s and update counter and last-check time
    """
    host = MockVideoHost(default_processing_result=False)
    start = clock()
    job = _processing_job(make_job, clock, check_count=3)
    ledger.add(job)
    orchestrator = make_orchestrator(video_host=host)

    clock.advance(39)
    orchestrator.run_tick()
    assert host.check_history == []

    clock.advance(2)
    orchestrator.run_tick()

    stored = ledger.get(job.job_id)
    assert host.check_history == ["vid123"]
    assert stored.processing_check_count == 4
    assert stored.last_processing_check_at == start + timedelta(seconds=41)


@pytest.mark.unit
def test_never_ready_stays_processing(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """Test a video that never finishes keeps being polled without a final post"""
    host = MockVideoHost(default_processing_result=False)
    job = make_job()
    ledger.add(job)
    orchestrator = make_orchestrator(video_host=host)

    orchestrator.run_tick()
    for _ in range(50):
        clock.advance(60)
        orchestrator.run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.PROCESSING
    assert stored.processing_check_count == 50
    assert stored.file_path.exists()
    assert mock_notifier.channel_messages == []
    assert _failure_dms(mock_notifier) == []


@pytest.mark.unit
def test_processing_check_ceiling(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """Test max_processing_checks fails a job that never finishes"""
    host = MockVideoHost(default_processing_result=False)
    job = _processing_job(make_job, clock)
    ledger.add(job)
    orchestrator = make_orchestrator(video_host=host, max_processing_checks=3)

    for _ in range(5):
        clock.advance(60)
        orchestrator.run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.FAILED
    assert "did not finish after 3 checks" in stored.error_message
    assert len(host.check_history) == 3
    assert len(_failure_dms(mock_notifier)) == 1


# =============================================================================
# FAILURES
# =============================================================================


@pytest.mark.unit
def test_upload_failure(make_orchestrator, ledger, mock_notifier, make_job):
    """
    Test a failed upload.

    Should:
    - Mark the job FAILED with the error text
    - Send exactly one failure DM naming the title and error
    - Delete the temp file and post nothing to the channel
    """
    host = MockVideoHost(upload_error=UploadError("quota exceeded"))
    job = make_job()
    ledger.add(job)

    make_orchestrator(video_host=host).run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.FAILED
    assert stored.error_message == "quota exceeded"
    assert stored.completed_at is not None
    assert not stored.file_path.exists()

    failures = _failure_dms(mock_notifier)
    assert len(failures) == 1
    assert failures[0].target_id == "111"
    assert "**Clutch round**: quota exceeded" in failures[0].text
    assert mock_notifier.channel_messages == []


@pytest.mark.unit
def test_processing_check_error_fails_job(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """Test an exception from the status query fails the job"""
    host = MockVideoHost(processing_results=[ProcessingCheckError("API unavailable")])
    job = _processing_job(make_job, clock)
    ledger.add(job)

    clock.advance(5)
    make_orchestrator(video_host=host).run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.FAILED
    assert stored.error_message == "API unavailable"
    assert not stored.file_path.exists()
    assert len(_failure_dms(mock_notifier)) == 1


@pytest.mark.unit
def test_failed_job_not_retried(make_orchestrator, ledger, mock_notifier, make_job, clock):
    """Test a failed job gets no further uploads or DMs"""
    host = MockVideoHost(upload_error=UploadError("bad file"))
    ledger.add(make_job())
    orchestrator = make_orchestrator(video_host=host)

    for _ in range(3):
        orchestrator.run_tick()
        clock.advance(5)

    assert len(host.upload_history) == 1
    assert len(_failure_dms(mock_notifier)) == 1


@pytest.mark.unit
def test_one_failure_does_not_affect_other_jobs(
    make_orchestrator, ledger, mock_notifier, make_job, tmp_path,
):
    """Test a failing job in the same tick leaves the others untouched"""
    good_file = tmp_path / "good.mp4"
    good_file.write_bytes(b"\x00" * 16)
    broken = make_job(job_id="broken", file_path=tmp_path / "missing.mp4")
    good = make_job(job_id="good", file_path=good_file)
    ledger.add(broken)
    ledger.add(good)

    make_orchestrator().run_tick()

    assert ledger.get("broken").status == JobStatus.FAILED
    assert ledger.get("good").status == JobStatus.PROCESSING
    assert len(_failure_dms(mock_notifier)) == 1


@pytest.mark.unit
def test_notification_failure_keeps_outcome(make_orchestrator, ledger, make_job, clock):
    """Test an undeliverable channel post does not change a completed job"""
    notifier = MockNotifier(fail_channel_posts=True, fail_dms=True)
    job = make_job()
    ledger.add(job)
    orchestrator = make_orchestrator(notifier=notifier)

    orchestrator.run_tick()
    clock.advance(5)
    orchestrator.run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.COMPLETED
    assert stored.error_message is None
    assert not stored.file_path.exists()


# =============================================================================
# INTERRUPTED UPLOADS
# =============================================================================


class _CancellingHost(MockVideoHost):
    """Host whose uploads are interrupted by shutdown"""

    def upload(self, job, on_progress=None, cancel_event=None):
        self.upload_history.append({"job_id": job.job_id})
        raise UploadCancelledError("shutdown")


@pytest.mark.unit
def test_cancelled_upload_left_uploading(make_orchestrator, ledger, mock_notifier, make_job):
    """Test a cancelled upload is neither failed nor cleaned up"""
    job = make_job()
    ledger.add(job)

    make_orchestrator(video_host=_CancellingHost()).run_tick()

    stored = ledger.get(job.job_id)
    assert stored.status == JobStatus.UPLOADING
    assert stored.file_path.exists()
    assert _failure_dms(mock_notifier) == []


@pytest.mark.unit
def test_uploading_job_is_resumed(make_orchestrator, ledger, mock_host, mock_notifier, make_job):
    """Test an UPLOADING job found at tick start is uploaded again without a start DM"""
    job = make_job()
    job.mark_uploading()
    ledger.add(job)

    make_orchestrator().run_tick()

    assert ledger.get(job.job_id).status == JobStatus.PROCESSING
    assert len(mock_host.upload_history) == 1
    assert mock_notifier.direct_messages == []


# =============================================================================
# HOUSEKEEPING
# =============================================================================


@pytest.mark.unit
def test_every_status_has_a_handler(make_orchestrator):
    orchestrator = make_orchestrator()

    assert set(orchestrator.status_handlers) == set(JobStatus)


@pytest.mark.unit
def test_finished_jobs_evicted(make_orchestrator, ledger, make_job, clock):
    """Test job_retention_hours drops old terminal jobs"""
    old = make_job(job_id="old")
    old.mark_failed("x", now=clock() - timedelta(hours=5))
    ledger.add(old)

    make_orchestrator(job_retention_hours=1).run_tick()

    assert ledger.get("old") is None


# =============================================================================
# THREAD LIFECYCLE
# =============================================================================


@pytest.mark.unit
def test_background_thread_completes_job(ledger, mock_notifier, make_job):
    """Test start()/stop() with the real clock and a tiny backoff"""
    job = make_job()
    ledger.add(job)
    orchestrator = UploadOrchestrator(
        ledger=ledger,
        video_host=MockVideoHost(),
        notifier=mock_notifier,
        tick_interval=0.01,
        backoff_base=0.01,
        backoff_cap=0.02,
        max_processing_checks=None,
        job_retention_hours=None,
    )

    orchestrator.start()
    try:
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            if ledger.get(job.job_id).status == JobStatus.COMPLETED:
                break
            time.sleep(0.01)
    finally:
        orchestrator.stop(timeout=2)

    assert ledger.get(job.job_id).status == JobStatus.COMPLETED
    assert not orchestrator.is_running
