"""
Interfaces Package

Abstract interfaces for video host implementations.
"""

from upload.interfaces.video_host_interface import (
    ProcessingCheckError,
    ProgressCallback,
    TransientHostError,
    UploadCancelledError,
    UploadError,
    UploadResult,
    VideoHostError,
    VideoHostInterface,
)

__all__ = [
    "ProcessingCheckError",
    "ProgressCallback",
    "TransientHostError",
    "UploadCancelledError",
    "UploadError",
    "UploadResult",
    "VideoHostError",
    "VideoHostInterface",
]
