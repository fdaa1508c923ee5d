"""
YouTube Video Host Implementation

Concrete implementation of VideoHostInterface for YouTube API v3.
Handles video uploads with the resumable upload protocol and
processing status checks for uploaded videos.
"""

import logging
import re
import threading
import time
from typing import Any, Dict, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload

from config.settings import (
    DEFAULT_PRIVACY_STATUS,
    DEFAULT_VIDEO_TAGS,
    UPLOAD_CHUNK_SIZE,
    UPLOAD_MAX_CHUNK_RETRIES,
    YOUTUBE_CATEGORY_ID,
)
from jobs.models.job_record import JobRecord
from upload.auth.oauth_manager import OAuthManager
from upload.constants import (
    CHUNK_RETRY_DELAY,
    PROCESSING_STATUS_SUCCEEDED,
    RETRIABLE_STATUS_CODES,
    TRANSIENT_UPLOAD_STATUSES,
    YOUTUBE_API_SERVICE_NAME,
    YOUTUBE_API_VERSION,
    UploadStatus,
)
from upload.interfaces.video_host_interface import (
    ProcessingCheckError,
    ProgressCallback,
    TransientHostError,
    UploadCancelledError,
    UploadError,
    UploadResult,
    VideoHostInterface,
)

# YouTube metadata limits
YOUTUBE_MAX_TITLE_LENGTH = 100
YOUTUBE_MAX_DESCRIPTION_LENGTH = 5000
# Characters YouTube rejects in titles and descriptions
_INVALID_METADATA_CHARS = re.compile(r"[<>]")


def sanitize_title(title: str) -> str:
    """Strip rejected characters and cut the title to YouTube's limit"""
    cleaned = _INVALID_METADATA_CHARS.sub("", title).strip()
    return cleaned[:YOUTUBE_MAX_TITLE_LENGTH] or "Untitled clip"


def sanitize_description(description: str) -> str:
    """
    Clean a description for the YouTube API.

    Removes ``<`` / ``>`` and, past 5000 characters, keeps whole lines only
    and appends an ellipsis marker.
    """
    cleaned = _INVALID_METADATA_CHARS.sub("", description or "")
    if len(cleaned) <= YOUTUBE_MAX_DESCRIPTION_LENGTH:
        return cleaned

    truncation_marker = "\n\n..."
    truncated = cleaned[: YOUTUBE_MAX_DESCRIPTION_LENGTH - len(truncation_marker)]
    last_newline = truncated.rfind("\n")
    if last_newline > 0:
        truncated = truncated[:last_newline]
    return truncated + truncation_marker


class YouTubeVideoHost(VideoHostInterface):
    """
    YouTube video host using YouTube Data API v3.

    Features:
    - Resumable uploads (chunked, memory efficient)
    - Retries server errors per chunk
    - Cooperative cancellation between chunks
    - Processing status polling by video id

    A fresh API client is built for every call from OAuthManager credentials,
    so an expired access token is refreshed before use.
    """

    def __init__(
        self,
        oauth_manager: OAuthManager,
        chunk_size: int = UPLOAD_CHUNK_SIZE,
        max_chunk_retries: int = UPLOAD_MAX_CHUNK_RETRIES,
        chunk_retry_delay: float = CHUNK_RETRY_DELAY,
    ):
        """
        Initialize YouTube video host.

        Args:
            oauth_manager: OAuth manager for authentication
            chunk_size: Resumable upload chunk size in bytes
            max_chunk_retries: Server-error retries before giving up
            chunk_retry_delay: Seconds to wait before retrying a chunk

        Example:
            oauth = OAuthManager(client_id, client_secret, refresh_token)
            host = YouTubeVideoHost(oauth)
        """
        self.logger = logging.getLogger(__name__)
        self.oauth_manager = oauth_manager
        self.chunk_size = chunk_size
        self.max_chunk_retries = max_chunk_retries
        self.chunk_retry_delay = chunk_retry_delay

        self.logger.info("YouTube Video Host initialized")

    def _build_service(self) -> Any:
        """Build a YouTube API client with valid credentials"""
        credentials = self.oauth_manager.get_credentials()
        return build(
            YOUTUBE_API_SERVICE_NAME,
            YOUTUBE_API_VERSION,
            credentials=credentials,
            cache_discovery=False,
        )

    def upload(
        self,
        job: JobRecord,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> UploadResult:
        """
        Upload the job's video to YouTube.

        Args:
            job: Job providing file path, title and description
            on_progress: Observer for upload percentage
            cancel_event: When set, abort between chunks

        Returns:
            UploadResult with the YouTube video id
        """
        start_time = time.time()
        video_path = job.file_path

        if not video_path.exists():
            raise UploadError(
                f"Video file not found: {video_path}",
                status=UploadStatus.INVALID_FILE,
            )

        file_size = video_path.stat().st_size
        if file_size == 0:
            raise UploadError(
                f"Video file is empty: {video_path}",
                status=UploadStatus.INVALID_FILE,
            )

        self.logger.info(
            f"Starting YouTube upload for job {job.job_id}: "
            f"{video_path} ({file_size} bytes)",
        )

        try:
            service = self._build_service()
        except Exception as e:
            raise UploadError(
                f"Failed to authenticate with YouTube: {e}",
                status=UploadStatus.AUTH_ERROR,
                cause=e,
            ) from e

        body = {
            "snippet": {
                "title": sanitize_title(job.title),
                "description": sanitize_description(job.description),
                "tags": DEFAULT_VIDEO_TAGS,
                "categoryId": YOUTUBE_CATEGORY_ID,
            },
            "status": {
                "privacyStatus": DEFAULT_PRIVACY_STATUS,
                "selfDeclaredMadeForKids": False,
            },
        }

        try:
            media = MediaFileUpload(
                str(video_path),
                chunksize=self.chunk_size,
                resumable=True,
                mimetype="video/*",
            )
            request = service.videos().insert(
                part="snippet,status",
                body=body,
                media_body=media,
            )
            video_id = self._execute_upload(request, job.job_id, on_progress, cancel_event)

        except (UploadError, UploadCancelledError):
            raise

        except HttpError as e:
            raise self._http_upload_error(
                f"YouTube upload failed: {e.resp.status} {e.reason}", e,
            ) from e

        except Exception as e:
            self.logger.error(f"Unexpected upload error for job {job.job_id}", exc_info=True)
            raise UploadError(
                f"YouTube upload failed: {e}",
                status=UploadStatus.FAILED,
                cause=e,
            ) from e

        upload_duration = time.time() - start_time
        self.logger.info(
            f"✅ Video uploaded for job {job.job_id}. YouTube ID: {video_id} "
            f"({upload_duration:.1f}s, {file_size} bytes)",
        )

        return UploadResult(
            video_id=video_id,
            upload_duration=upload_duration,
            file_size=file_size,
        )

    def _execute_upload(
        self,
        request: Any,
        job_id: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        Execute resumable upload with progress tracking.

        Args:
            request: YouTube API insert request
            job_id: Job id for log messages
            on_progress: Observer for upload percentage
            cancel_event: When set, abort between chunks

        Returns:
            Video ID of uploaded video

        Raises:
            UploadError: If upload fails
            UploadCancelledError: If cancel_event is set
        """
        response: Optional[Dict[str, Any]] = None
        retries = 0
        last_progress = 0

        self._report_progress(on_progress, 0)

        while response is None:
            if cancel_event is not None and cancel_event.is_set():
                raise UploadCancelledError(f"Upload cancelled for job {job_id}")

            try:
                status, response = request.next_chunk()

                if status:
                    progress = int(status.progress() * 100)
                    if progress >= last_progress + 10:  # Log every 10%
                        self.logger.info(f"Upload progress for job {job_id}: {progress}%")
                        last_progress = progress
                    self._report_progress(on_progress, progress)

            except HttpError as e:
                if e.resp.status not in RETRIABLE_STATUS_CODES:
                    raise self._http_upload_error(
                        f"Upload failed: {e.resp.status} {e.reason}", e,
                    ) from e

                retries += 1
                if retries > self.max_chunk_retries:
                    raise TransientHostError(
                        f"Max retries exceeded: {e.resp.status} {e.reason}",
                        status=UploadStatus.NETWORK_ERROR,
                        cause=e,
                    ) from e

                self.logger.warning(
                    f"Retriable error {e.resp.status} for job {job_id}, "
                    f"retry {retries}/{self.max_chunk_retries}",
                )
                if cancel_event is not None:
                    cancel_event.wait(self.chunk_retry_delay)
                else:
                    time.sleep(self.chunk_retry_delay)

        if not response.get("id"):
            raise UploadError(
                "Upload completed but no video ID returned",
                status=UploadStatus.FAILED,
            )

        self._report_progress(on_progress, 100)
        return response["id"]

    def _report_progress(self, on_progress: Optional[ProgressCallback], percent: int) -> None:
        """Call the progress observer; its errors never affect the upload"""
        if on_progress is None:
            return
        try:
            on_progress(percent)
        except Exception as e:
            self.logger.warning(f"Progress observer failed: {e}")

    def is_processing_complete(self, video_id: str) -> bool:
        """
        Check whether YouTube finished processing a video.

        Args:
            video_id: YouTube video id

        Returns:
            True when processingStatus is "succeeded"

        Raises:
            ProcessingCheckError: If the API call fails
        """
        try:
            service = self._build_service()
            response = service.videos().list(
                part="processingDetails,status",
                id=video_id,
            ).execute()

        except HttpError as e:
            raise ProcessingCheckError(
                f"Processing check failed for {video_id}: {e.resp.status} {e.reason}",
            ) from e

        except Exception as e:
            raise ProcessingCheckError(
                f"Processing check failed for {video_id}: {e}",
            ) from e

        items = response.get("items") or []
        if not items:
            self.logger.warning(
                f"Video {video_id} not found when checking processing status",
            )
            return False

        video = items[0]
        processing_status = (video.get("processingDetails") or {}).get("processingStatus")
        upload_status = (video.get("status") or {}).get("uploadStatus")

        self.logger.info(
            f"Video {video_id} processing status: {processing_status}, "
            f"upload status: {upload_status}",
        )

        return processing_status == PROCESSING_STATUS_SUCCEEDED

    def _http_upload_error(self, message: str, error: HttpError) -> UploadError:
        """Wrap an API error, as TransientHostError when it is temporary"""
        status = self._parse_http_error(error)
        error_class = TransientHostError if status in TRANSIENT_UPLOAD_STATUSES else UploadError
        return error_class(message, status=status, cause=error)

    def _parse_http_error(self, error: HttpError) -> UploadStatus:
        """
        Parse HTTP error to determine appropriate status code.

        Args:
            error: HTTP error from YouTube API

        Returns:
            Appropriate UploadStatus enum
        """
        if error.resp.status == 401:
            return UploadStatus.AUTH_ERROR
        if error.resp.status in [403, 429]:
            # YouTube reports quotaExceeded / uploadLimitExceeded as 403
            reason = str(error)
            if error.resp.status == 429 or "quota" in reason.lower() or "limit" in reason.lower():
                return UploadStatus.QUOTA_EXCEEDED
            return UploadStatus.AUTH_ERROR
        if error.resp.status >= 500:
            return UploadStatus.NETWORK_ERROR
        return UploadStatus.FAILED
