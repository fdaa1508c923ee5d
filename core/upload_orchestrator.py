"""
Upload Orchestrator

Background worker that drives every pending job to a terminal state:

    QUEUED      → DM "starting upload", upload to the video host
    UPLOADING   → (interrupted upload) upload again
    PROCESSING  → poll the host with backoff until the video is ready,
                  then announce it in the target channel
    COMPLETED / FAILED → nothing left to do

Any error while handling a job fails that job: the uploader gets a DM with
the error and the temp file is deleted. Other jobs in the same tick are
unaffected.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from config.settings import (
    JOB_RETENTION_HOURS,
    PROCESSING_BACKOFF_BASE,
    PROCESSING_BACKOFF_CAP,
    PROCESSING_MAX_CHECKS,
    WORKER_TICK_INTERVAL,
)
from core.backoff import is_check_due
from jobs.constants import JobStatus
from jobs.interfaces.ledger_interface import JobLedgerInterface
from jobs.models.job_record import JobRecord, utc_now
from notify.interfaces.notifier_interface import NotifierInterface
from notify.messages import (
    clip_published_message,
    upload_failed_message,
    upload_started_message,
)
from upload.interfaces.video_host_interface import (
    UploadCancelledError,
    VideoHostInterface,
)

# Type alias
Clock = Callable[[], datetime]


class UploadOrchestrator:
    """
    Ticking worker for the upload-and-publish pipeline.

    Jobs are processed one after another on a single thread, so a job is
    never handled concurrently. The ledger hands out copies; every state
    change is written back with ledger.update().

    Usage:
        orchestrator = UploadOrchestrator(ledger, video_host, notifier)
        orchestrator.start()
        ...
        orchestrator.stop()

    Tests drive it synchronously with run_tick() and an injected clock.
    """

    def __init__(
        self,
        ledger: JobLedgerInterface,
        video_host: VideoHostInterface,
        notifier: NotifierInterface,
        tick_interval: float = WORKER_TICK_INTERVAL,
        backoff_base: float = PROCESSING_BACKOFF_BASE,
        backoff_cap: float = PROCESSING_BACKOFF_CAP,
        max_processing_checks: Optional[int] = PROCESSING_MAX_CHECKS,
        job_retention_hours: Optional[float] = JOB_RETENTION_HOURS,
        clock: Clock = utc_now,
    ):
        """
        Initialize orchestrator.

        Args:
            ledger: Shared job store
            video_host: Where videos are uploaded and processed
            notifier: DM / channel message sender
            tick_interval: Seconds between ledger scans
            backoff_base: Wait before the first processing check
            backoff_cap: Longest wait between processing checks
            max_processing_checks: Fail a job after this many unfinished
                checks (None = poll forever)
            job_retention_hours: Evict finished jobs older than this
                (None = keep them)
            clock: Returns the current UTC time
        """
        self.logger = logging.getLogger(__name__)
        self.ledger = ledger
        self.video_host = video_host
        self.notifier = notifier
        self.tick_interval = tick_interval
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self.max_processing_checks = max_processing_checks
        self.job_retention_hours = job_retention_hours
        self._clock = clock

        # Also checked by the video host between upload chunks
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Status handlers mapping (one per status, terminal ones are no-ops)
        self.status_handlers: Dict[JobStatus, Callable[[JobRecord], None]] = {
            JobStatus.QUEUED: self._handle_queued,
            JobStatus.UPLOADING: self._handle_uploading,
            JobStatus.PROCESSING: self._handle_processing,
            JobStatus.COMPLETED: self._handle_terminal,
            JobStatus.FAILED: self._handle_terminal,
        }

        self.logger.info(
            f"Upload orchestrator initialized (tick: {tick_interval}s, "
            f"backoff: {backoff_base}s..{backoff_cap}s)",
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background worker thread"""
        if self.is_running:
            self.logger.warning("Upload orchestrator already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="UploadOrchestrator",
        )
        self._thread.start()

    def stop(self, timeout: float = 30.0) -> None:
        """
        Signal the worker to stop and wait for it.

        An upload in flight is abandoned at the next chunk boundary;
        its job stays UPLOADING and is picked up again on the next start().
        """
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            self.logger.info("Waiting for upload orchestrator to stop...")
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                self.logger.warning("Upload orchestrator still running after timeout")

    def _run_loop(self) -> None:
        self.logger.info("Upload orchestrator thread started")

        while not self._stop_event.is_set():
            try:
                self.run_tick()
            except Exception as e:
                self.logger.error(f"Upload orchestrator tick error: {e}", exc_info=True)

            self._stop_event.wait(self.tick_interval)

        self.logger.info("Upload orchestrator thread stopped")

    # =========================================================================
    # TICK
    # =========================================================================

    def run_tick(self) -> int:
        """
        Process every pending job once.

        Returns:
            Number of jobs handled this tick
        """
        self._evict_finished()

        handled = 0
        for job in self.ledger.list_pending():
            if self._stop_event.is_set():
                break
            try:
                self._process_job(job)
            except Exception as e:
                self.logger.error(f"Unhandled error for job {job.job_id}: {e}", exc_info=True)
            handled += 1

        return handled

    def _process_job(self, job: JobRecord) -> None:
        """Dispatch one job to its status handler; failures fail the job"""
        handler = self.status_handlers[job.status]

        try:
            handler(job)

        except UploadCancelledError:
            self.logger.info(f"Upload for job {job.job_id} cancelled by shutdown")

        except Exception as e:
            self.logger.error(f"❌ Job {job.job_id} failed: {e}", exc_info=True)
            self._fail_job(job, str(e) or type(e).__name__)

    # =========================================================================
    # STATUS HANDLERS
    # =========================================================================

    def _handle_queued(self, job: JobRecord) -> None:
        self._send_dm(job, upload_started_message(job))

        job.mark_uploading()
        self.ledger.update(job)

        self._upload(job)

    def _handle_uploading(self, job: JobRecord) -> None:
        self.logger.warning(f"Job {job.job_id} was left uploading, restarting upload")
        self._upload(job)

    def _handle_processing(self, job: JobRecord) -> None:
        now = self._clock()

        if job.start_processing_clock(now):
            self.ledger.update(job)
            return

        if not is_check_due(
            now,
            job.last_processing_check_at,
            job.processing_check_count,
            self.backoff_base,
            self.backoff_cap,
        ):
            return

        complete = self.video_host.is_processing_complete(job.youtube_video_id)
        job.record_processing_check(now)

        if complete:
            self._complete_job(job, now)
            return

        if (
            self.max_processing_checks is not None
            and job.processing_check_count >= self.max_processing_checks
        ):
            self._fail_job(
                job,
                f"YouTube processing did not finish after {job.processing_check_count} checks",
            )
            return

        self.logger.debug(
            f"Job {job.job_id} still processing (check {job.processing_check_count})",
        )
        self.ledger.update(job)

    def _handle_terminal(self, job: JobRecord) -> None:
        self.logger.debug(f"Job {job.job_id} already {job.status.value}, nothing to do")

    # =========================================================================
    # JOB OPERATIONS
    # =========================================================================

    def _upload(self, job: JobRecord) -> None:
        """Upload the job's file and move it to PROCESSING"""

        def on_progress(percent: int) -> None:
            self.logger.debug(f"Job {job.job_id} upload progress: {percent}%")

        result = self.video_host.upload(
            job,
            on_progress=on_progress,
            cancel_event=self._stop_event,
        )

        job.mark_processing(result.video_id, now=self._clock())
        self.ledger.update(job)

    def _complete_job(self, job: JobRecord, now: datetime) -> None:
        """Mark completed, announce in the target channel, clean up"""
        job.mark_completed(now)
        self.ledger.update(job)
        self.logger.info(f"✅ Job {job.job_id} completed: {job.youtube_url}")

        try:
            posted = self.notifier.post_channel_message(
                job.target_channel,
                clip_published_message(job),
                ping_all=job.ping_channel,
            )
        except Exception as e:
            self.logger.error(f"Notifier error posting job {job.job_id}: {e}", exc_info=True)
            posted = False

        if not posted:
            self.logger.warning(
                f"Could not post job {job.job_id} to channel {job.target_channel}",
            )

        self._cleanup_temp_file(job)

    def _fail_job(self, job: JobRecord, error: str) -> None:
        """Mark failed, tell the uploader, clean up"""
        if job.is_terminal:
            # The outcome was already decided (and announced)
            self.logger.error(
                f"Error after job {job.job_id} reached {job.status.value}: {error}",
            )
            return

        job.mark_failed(error, now=self._clock())
        self.ledger.update(job)

        self._send_dm(job, upload_failed_message(job, job.error_message))
        self._cleanup_temp_file(job)

    def _send_dm(self, job: JobRecord, text: str) -> None:
        try:
            sent = self.notifier.send_direct_message(job.discord_user_id, text)
        except Exception as e:
            self.logger.error(f"Notifier error for job {job.job_id}: {e}", exc_info=True)
            sent = False

        if not sent:
            self.logger.warning(f"Could not DM {job.discord_username} about job {job.job_id}")

    def _cleanup_temp_file(self, job: JobRecord) -> None:
        """Delete the uploaded temp file; failures are only logged"""
        try:
            job.file_path.unlink(missing_ok=True)
            self.logger.info(f"Deleted temp file for job {job.job_id}: {job.file_path}")
        except OSError as e:
            self.logger.warning(f"Failed to delete temp file {job.file_path}: {e}")

    def _evict_finished(self) -> None:
        if self.job_retention_hours is None:
            return

        cutoff = self._clock() - timedelta(hours=self.job_retention_hours)
        evicted = self.ledger.evict_finished(cutoff)
        if evicted:
            self.logger.info(f"Evicted {evicted} finished job(s) older than {cutoff}")
