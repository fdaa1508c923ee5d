"""
Upload Module

Video hosting for shared clips: YouTube uploads with OAuth authentication
and processing status checks.

Public API:
    - VideoHostInterface: Contract the upload worker depends on
    - UploadResult: Successful upload result
    - UploadStatus: Failure categories
    - create_video_host: Factory function

Usage:
    from upload import create_video_host

    host = create_video_host()
    result = host.upload(job)
    done = host.is_processing_complete(result.video_id)
"""

from upload.constants import UploadStatus
from upload.factory import VideoHostFactory, create_video_host
from upload.interfaces.video_host_interface import (
    ProcessingCheckError,
    TransientHostError,
    UploadCancelledError,
    UploadError,
    UploadResult,
    VideoHostError,
    VideoHostInterface,
)

# Public API
__all__ = [
    "ProcessingCheckError",
    "TransientHostError",
    "UploadCancelledError",
    "UploadError",
    "UploadResult",
    "UploadStatus",
    "VideoHostError",
    "VideoHostFactory",
    "VideoHostInterface",
    "create_video_host",
]
