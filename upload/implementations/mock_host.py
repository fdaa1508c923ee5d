"""
Mock Video Host Implementation

Simulated video host for testing without the YouTube API.
Processing results can be scripted per check to exercise the worker's
polling, completion and failure paths.
"""

import logging
import threading
import time
from collections import deque
from typing import Deque, Iterable, List, Optional, Union
from uuid import uuid4

from jobs.models.job_record import JobRecord
from upload.constants import UploadStatus
from upload.interfaces.video_host_interface import (
    ProcessingCheckError,
    ProgressCallback,
    UploadCancelledError,
    UploadError,
    UploadResult,
    VideoHostInterface,
)

# A scripted processing check: a bool result or an exception to raise
ProcessingOutcome = Union[bool, Exception]


class MockVideoHost(VideoHostInterface):
    """
    Mock video host for testing.

    Useful for:
    - Unit tests of the upload worker
    - Development without YouTube credentials
    - CI/CD pipelines
    """

    def __init__(
        self,
        simulate_timing: bool = False,
        upload_error: Optional[Exception] = None,
        processing_results: Optional[Iterable[ProcessingOutcome]] = None,
        default_processing_result: bool = True,
    ):
        """
        Initialize mock video host.

        Args:
            simulate_timing: If True, sleep briefly to mimic an upload
            upload_error: Raise this from every upload() call
            processing_results: Outcomes returned by successive processing
                checks (True/False or an exception to raise)
            default_processing_result: Result once the script runs out

        Example:
            # Complete on the third check
            host = MockVideoHost(processing_results=[False, False, True])

            # Upload always fails
            host = MockVideoHost(upload_error=UploadError("quota"))
        """
        self.logger = logging.getLogger(__name__)
        self.simulate_timing = simulate_timing
        self.upload_error = upload_error
        self.default_processing_result = default_processing_result
        self._processing_script: Deque[ProcessingOutcome] = deque(processing_results or [])

        # Track calls for testing
        self.upload_history: List[dict] = []
        self.check_history: List[str] = []

        self.logger.info(f"Mock Video Host initialized (timing: {simulate_timing})")

    def upload(
        self,
        job: JobRecord,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> UploadResult:
        """Simulate an upload, validating that the file exists"""
        self.upload_history.append(
            {
                "job_id": job.job_id,
                "title": job.title,
                "file_path": str(job.file_path),
            },
        )

        if self.upload_error is not None:
            self.logger.error(f"[MOCK] Upload failed: {self.upload_error}")
            raise self.upload_error

        if not job.file_path.exists():
            raise UploadError(
                f"Video file not found: {job.file_path}",
                status=UploadStatus.INVALID_FILE,
            )

        for percent in (0, 50, 100):
            if cancel_event is not None and cancel_event.is_set():
                raise UploadCancelledError(f"Upload cancelled for job {job.job_id}")
            if on_progress:
                on_progress(percent)
            if self.simulate_timing:
                time.sleep(0.5)

        video_id = f"mock_{uuid4().hex[:11]}"
        self.upload_history[-1]["video_id"] = video_id

        self.logger.info(f"[MOCK] ✅ Upload successful: {video_id}")
        return UploadResult(
            video_id=video_id,
            file_size=job.file_path.stat().st_size,
        )

    def is_processing_complete(self, video_id: str) -> bool:
        """Return the next scripted processing outcome"""
        self.check_history.append(video_id)

        if self._processing_script:
            outcome = self._processing_script.popleft()
        else:
            outcome = self.default_processing_result

        if isinstance(outcome, Exception):
            if isinstance(outcome, ProcessingCheckError):
                raise outcome
            raise ProcessingCheckError(str(outcome)) from outcome

        self.logger.debug(f"[MOCK] Processing check {video_id}: {outcome}")
        return outcome

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def queue_processing_results(self, *outcomes: ProcessingOutcome) -> None:
        """Append outcomes to the processing script"""
        self._processing_script.extend(outcomes)

    def get_last_upload(self) -> Optional[dict]:
        """
        Get most recent upload.

        Returns:
            Last upload record, or None
        """
        return self.upload_history[-1] if self.upload_history else None

    def clear_history(self) -> None:
        """Clear upload and check history"""
        self.upload_history.clear()
        self.check_history.clear()
        self.logger.debug("[MOCK] History cleared")
