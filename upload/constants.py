"""
Upload Constants

Centralized YouTube API constants for the video host module.
Tunable values (chunk size, privacy, category) live in config/settings.py.
"""

from enum import Enum

# =============================================================================
# YOUTUBE API CONFIGURATION
# =============================================================================

# OAuth 2.0 scopes required for YouTube operations
# https://developers.google.com/youtube/v3/guides/authentication
YOUTUBE_SCOPES = [
    "https://www.googleapis.com/auth/youtube.upload",
    "https://www.googleapis.com/auth/youtube.readonly",
]

# YouTube API service details
YOUTUBE_API_SERVICE_NAME = "youtube"
YOUTUBE_API_VERSION = "v3"

# Google OAuth token endpoint (refresh-token exchange)
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# =============================================================================
# UPLOAD / PROCESSING
# =============================================================================

# Server errors worth retrying during a chunked upload
RETRIABLE_STATUS_CODES = [500, 502, 503, 504]

# Seconds to wait before retrying a failed chunk
CHUNK_RETRY_DELAY = 5

# processingDetails.processingStatus value once the video is playable
PROCESSING_STATUS_SUCCEEDED = "succeeded"

# =============================================================================
# UPLOAD STATUS
# =============================================================================


class UploadStatus(Enum):
    """Failure categories reported by the video host"""

    FAILED = "failed"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    INVALID_FILE = "invalid_file"
    QUOTA_EXCEEDED = "quota_exceeded"


# Failures caused by temporary host trouble rather than the clip itself
TRANSIENT_UPLOAD_STATUSES = frozenset(
    {UploadStatus.NETWORK_ERROR, UploadStatus.QUOTA_EXCEEDED},
)
