"""
Job Record Model

Data class representing one upload-to-publish job and its lifecycle:
queued → uploading → processing → completed/failed
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from jobs.constants import (
    ALLOWED_TRANSITIONS,
    PENDING_STATUSES,
    TERMINAL_STATUSES,
    YOUTUBE_WATCH_URL,
    JobStatus,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


class InvalidTransitionError(Exception):
    """Raised when a job is asked to move to a status it cannot reach"""

    def __init__(self, job_id: str, current: JobStatus, requested: JobStatus):
        super().__init__(
            f"Job {job_id}: illegal transition {current.value} -> {requested.value}",
        )
        self.job_id = job_id
        self.current = current
        self.requested = requested


@dataclass
class JobRecord:
    """
    Represents one user-submitted video on its way to YouTube and Discord.

    Status only moves forward (see ALLOWED_TRANSITIONS). All mutation goes
    through the mark_* methods so the rules below hold in one place:
    - youtube_video_id is set from the moment the job reaches PROCESSING
    - processing_check_count only grows while PROCESSING
    - terminal jobs are never touched again
    """

    # Identification
    job_id: str
    discord_user_id: str
    discord_username: str

    # What to publish and where
    title: str
    target_channel: str
    file_path: Path
    description: str = ""
    publish_message: str = ""
    ping_channel: bool = False

    # Lifecycle
    status: JobStatus = JobStatus.QUEUED
    youtube_video_id: Optional[str] = None
    error_message: Optional[str] = None

    # Timestamps (UTC)
    created_at: datetime = field(default_factory=utc_now)
    processing_started_at: Optional[datetime] = None
    last_processing_check_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Polling
    processing_check_count: int = 0

    def __post_init__(self):
        """Ensure file_path is a Path object"""
        if not isinstance(self.file_path, Path):
            self.file_path = Path(self.file_path)

    @property
    def is_pending(self) -> bool:
        """Check if the worker still has to drive this job"""
        return self.status in PENDING_STATUSES

    @property
    def is_terminal(self) -> bool:
        """Check if job reached COMPLETED or FAILED"""
        return self.status in TERMINAL_STATUSES

    @property
    def youtube_url(self) -> Optional[str]:
        """Watch URL once the video id is known"""
        if not self.youtube_video_id:
            return None
        return YOUTUBE_WATCH_URL.format(video_id=self.youtube_video_id)

    def _transition_to(self, new_status: JobStatus, reason: str = "") -> None:
        """Move to new_status if the transition table allows it"""
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.job_id, self.status, new_status)

        old_status = self.status
        self.status = new_status

        log_msg = f"Job {self.job_id}: {old_status.value} -> {new_status.value}"
        if reason:
            log_msg += f" ({reason})"
        logger.info(log_msg)

    def mark_uploading(self) -> None:
        """Mark job as upload in progress"""
        self._transition_to(JobStatus.UPLOADING, "upload started")

    def mark_processing(self, video_id: str, now: Optional[datetime] = None) -> None:
        """Mark job as uploaded; YouTube is processing video_id"""
        if not video_id:
            raise ValueError("video_id is required to enter processing")

        self._transition_to(JobStatus.PROCESSING, f"YouTube id {video_id}")
        now = now or utc_now()
        self.youtube_video_id = video_id
        self.processing_started_at = now
        self.last_processing_check_at = now

    def start_processing_clock(self, now: Optional[datetime] = None) -> bool:
        """
        Set the processing timestamps if they are missing.

        Returns:
            True if the timestamps were initialised by this call
        """
        if self.status != JobStatus.PROCESSING or self.processing_started_at:
            return False
        now = now or utc_now()
        self.processing_started_at = now
        self.last_processing_check_at = now
        return True

    def record_processing_check(self, now: Optional[datetime] = None) -> None:
        """Count one remote processing status check"""
        if self.status != JobStatus.PROCESSING:
            raise InvalidTransitionError(self.job_id, self.status, JobStatus.PROCESSING)
        self.processing_check_count += 1
        self.last_processing_check_at = now or utc_now()

    def mark_completed(self, now: Optional[datetime] = None) -> None:
        """Mark job as processed and ready to announce"""
        self._transition_to(JobStatus.COMPLETED, "processing finished")
        self.completed_at = now or utc_now()

    def mark_failed(self, error: str, now: Optional[datetime] = None) -> None:
        """Mark job as failed with the error shown to the uploader"""
        self._transition_to(JobStatus.FAILED, error)
        self.error_message = error or "Unknown error"
        self.completed_at = now or utc_now()

    def to_status_dict(self) -> Dict[str, Any]:
        """JSON-friendly snapshot for status queries"""

        def _iso(value: Optional[datetime]) -> Optional[str]:
            return value.isoformat() if value else None

        return {
            "jobId": self.job_id,
            "status": self.status.value,
            "title": self.title,
            "targetChannel": self.target_channel,
            "youtubeVideoId": self.youtube_video_id,
            "youtubeUrl": self.youtube_url,
            "errorMessage": self.error_message,
            "createdAt": _iso(self.created_at),
            "processingStartedAt": _iso(self.processing_started_at),
            "lastProcessingCheckAt": _iso(self.last_processing_check_at),
            "processingCheckCount": self.processing_check_count,
            "completedAt": _iso(self.completed_at),
        }
