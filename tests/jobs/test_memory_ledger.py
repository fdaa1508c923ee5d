"""
In-Memory Ledger Tests

Tests for the job ledger showing:
- Copy semantics (no shared mutable state with callers)
- Pending filtering and ordering
- Concurrent access from several threads
- Eviction of finished jobs

To run these tests:
    pytest tests/jobs/test_memory_ledger.py -v
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from jobs.constants import JobStatus
from jobs.interfaces.ledger_interface import LedgerError

# =============================================================================
# BASIC OPERATIONS
# =============================================================================


@pytest.mark.unit
def test_add_and_get(ledger, make_job):
    """Test a stored job can be read back by id"""
    job = make_job(job_id="a")
    ledger.add(job)

    stored = ledger.get("a")

    assert stored is not None
    assert stored.job_id == "a"
    assert stored.title == job.title
    assert len(ledger) == 1


@pytest.mark.unit
def test_get_unknown_returns_none(ledger):
    """Test an unknown id yields None"""
    assert ledger.get("missing") is None


@pytest.mark.unit
def test_add_duplicate_raises(ledger, make_job):
    """Test the same id cannot be added twice"""
    ledger.add(make_job(job_id="a"))

    with pytest.raises(LedgerError):
        ledger.add(make_job(job_id="a"))


@pytest.mark.unit
def test_update_unknown_raises(ledger, make_job):
    """Test updating a job that was never added fails"""
    with pytest.raises(LedgerError):
        ledger.update(make_job(job_id="ghost"))


# =============================================================================
# COPY SEMANTICS
# =============================================================================


@pytest.mark.unit
def test_working_copies_are_isolated(ledger, make_job):
    """
    Test callers never hold the stored record.

    Should:
    - Ignore edits to the object passed to add()
    - Ignore edits to objects returned by get() until update()
    """
    job = make_job(job_id="a")
    ledger.add(job)
    job.mark_uploading()
    assert ledger.get("a").status == JobStatus.QUEUED

    working = ledger.get("a")
    working.mark_uploading()
    assert ledger.get("a").status == JobStatus.QUEUED

    ledger.update(working)
    assert ledger.get("a").status == JobStatus.UPLOADING


@pytest.mark.unit
def test_last_writer_wins(ledger, make_job):
    """Test two working copies of one job: the later update is kept"""
    ledger.add(make_job(job_id="a"))

    first = ledger.get("a")
    second = ledger.get("a")
    first.mark_uploading()
    second.mark_failed("cancelled")

    ledger.update(first)
    ledger.update(second)

    assert ledger.get("a").status == JobStatus.FAILED


# =============================================================================
# LISTING
# =============================================================================


@pytest.mark.unit
def test_list_pending_filters_terminal_jobs(ledger, make_job):
    """Test only queued, uploading and processing jobs are pending"""
    base = datetime(2025, 6, 1, tzinfo=timezone.utc)
    queued = make_job(job_id="queued", created_at=base)
    uploading = make_job(job_id="uploading", created_at=base + timedelta(seconds=1))
    uploading.mark_uploading()
    failed = make_job(job_id="failed", created_at=base + timedelta(seconds=2))
    failed.mark_failed("nope")

    for job in (failed, uploading, queued):
        ledger.add(job)

    pending = ledger.list_pending()

    assert [j.job_id for j in pending] == ["queued", "uploading"]
    assert len(ledger.list_jobs()) == 3


# =============================================================================
# CONCURRENCY
# =============================================================================


@pytest.mark.unit
def test_concurrent_updates_do_not_interfere(ledger, make_job):
    """
    Test many threads updating different jobs at once.

    Should:
    - Lose no job
    - Leave every job with its own final state
    """
    job_ids = [f"job-{i}" for i in range(20)]
    for job_id in job_ids:
        ledger.add(make_job(job_id=job_id))

    def worker(job_id):
        for _ in range(50):
            working = ledger.get(job_id)
            ledger.update(working)
        working = ledger.get(job_id)
        working.mark_uploading()
        ledger.update(working)

    threads = [threading.Thread(target=worker, args=(job_id,)) for job_id in job_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(ledger) == len(job_ids)
    assert all(ledger.get(job_id).status == JobStatus.UPLOADING for job_id in job_ids)


@pytest.mark.unit
def test_add_while_listing(ledger, make_job):
    """Test adding jobs while another thread lists them"""
    stop = threading.Event()
    errors = []

    def reader():
        while not stop.is_set():
            try:
                ledger.list_pending()
            except Exception as e:  # pragma: no cover - failure path
                errors.append(e)

    thread = threading.Thread(target=reader)
    thread.start()
    for i in range(200):
        ledger.add(make_job(job_id=f"job-{i}"))
    stop.set()
    thread.join()

    assert errors == []
    assert len(ledger.list_pending()) == 200


# =============================================================================
# EVICTION
# =============================================================================


@pytest.mark.unit
def test_evict_finished(ledger, make_job):
    """
    Test eviction of old terminal jobs.

    Should:
    - Remove terminal jobs completed before the cutoff
    - Keep recent terminal jobs and all pending jobs
    """
    now = datetime(2025, 6, 1, 12, tzinfo=timezone.utc)

    old = make_job(job_id="old")
    old.mark_failed("x", now=now - timedelta(hours=48))
    recent = make_job(job_id="recent")
    recent.mark_failed("x", now=now - timedelta(hours=1))
    pending = make_job(job_id="pending", created_at=now - timedelta(hours=72))

    for job in (old, recent, pending):
        ledger.add(job)

    evicted = ledger.evict_finished(older_than=now - timedelta(hours=24))

    assert evicted == 1
    assert ledger.get("old") is None
    assert ledger.get("recent") is not None
    assert ledger.get("pending") is not None
