"""
Implementations Package

Concrete video host implementations.
"""

from upload.implementations.mock_host import MockVideoHost
from upload.implementations.youtube_host import YouTubeVideoHost

__all__ = [
    "MockVideoHost",
    "YouTubeVideoHost",
]
