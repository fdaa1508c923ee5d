"""
Video Host Interface

Abstract interface for video hosting implementations.
The upload worker depends on this abstraction, not on the YouTube API client.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from jobs.models.job_record import JobRecord
from upload.constants import UploadStatus

# Progress observer: receives 0-100 while an upload runs
ProgressCallback = Callable[[int], None]


@dataclass
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        video_id: Remote video id assigned by the host
        upload_duration: Time taken to upload in seconds
        file_size: Size of uploaded file in bytes
    """

    video_id: str
    upload_duration: float = 0.0
    file_size: int = 0


class VideoHostInterface(ABC):
    """
    Abstract base class for video hosts.

    Any host implementation (YouTube, mock, ...) must implement these methods.
    """

    @abstractmethod
    def upload(
        self,
        job: JobRecord,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> UploadResult:
        """
        Upload the job's video file.

        Returns as soon as the host acknowledges the upload with a video id,
        which may be well before server-side processing is done.

        Args:
            job: Job providing file path, title and description
            on_progress: Observer for upload percentage (never affects control flow)
            cancel_event: When set, abort between chunks

        Returns:
            UploadResult with the remote video id

        Raises:
            UploadError: On network, auth, quota or file failures
            UploadCancelledError: If cancel_event was set mid-upload
        """

    @abstractmethod
    def is_processing_complete(self, video_id: str) -> bool:
        """
        Check whether the host finished processing a video.

        Args:
            video_id: Remote video id from a previous upload

        Returns:
            True only when processing succeeded; False for any other state,
            including a video the host can't find

        Raises:
            ProcessingCheckError: If the status query itself fails
        """


class VideoHostError(Exception):
    """Base class for video host errors"""


class UploadError(VideoHostError):
    """
    Exception raised when an upload fails.

    Examples:
    - Authentication failed
    - Network error
    - Missing video file
    - API quota exceeded
    """

    def __init__(
        self,
        message: str,
        status: UploadStatus = UploadStatus.FAILED,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.status = status
        if cause is not None:
            self.__cause__ = cause


class TransientHostError(UploadError):
    """
    Upload failed on temporary host trouble (network, server errors, quota).

    The job still fails; there is no retry beyond the per-chunk retries.
    """


class UploadCancelledError(VideoHostError):
    """Upload aborted because shutdown was requested"""


class ProcessingCheckError(VideoHostError):
    """The processing status query failed"""
