"""
Job Module Enums

Type definitions for the upload job pipeline.
Configuration values live in config/settings.py; this module only holds the
status type and the transition table that every job obeys.
"""

from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class JobStatus(Enum):
    """Upload job status states (values are the strings exposed to clients)"""

    QUEUED = "Queued"  # Saved by intake, waiting for the worker
    UPLOADING = "Uploading"  # Resumable upload to YouTube in progress
    PROCESSING = "Processing"  # Uploaded, YouTube still transcoding
    COMPLETED = "Completed"  # Processed and announced in Discord
    FAILED = "Failed"  # Gave up, uploader was notified


# =============================================================================
# STATE MACHINE
# =============================================================================

# Statuses the worker still has to drive forward
PENDING_STATUSES = frozenset(
    {JobStatus.QUEUED, JobStatus.UPLOADING, JobStatus.PROCESSING},
)

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

# Forward-only transitions; terminal states have no way out
ALLOWED_TRANSITIONS = {
    JobStatus.QUEUED: frozenset({JobStatus.UPLOADING, JobStatus.FAILED}),
    JobStatus.UPLOADING: frozenset({JobStatus.PROCESSING, JobStatus.FAILED}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
