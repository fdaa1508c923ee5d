"""
Video Host Factory

Factory pattern for creating video host implementations.
Same shape as notify/factory.py.

Automatically configures from config.settings (which reads .env).
"""

import logging
from typing import Literal, Optional

from config import settings
from upload.auth.oauth_manager import OAuthManager
from upload.implementations.mock_host import MockVideoHost
from upload.implementations.youtube_host import YouTubeVideoHost
from upload.interfaces.video_host_interface import VideoHostInterface

# Type alias
VideoHostMode = Literal["auto", "youtube", "mock"]


class VideoHostFactory:
    """
    Factory for creating video host implementations.

    Reads configuration from settings:
    - YOUTUBE_CLIENT_ID
    - YOUTUBE_CLIENT_SECRET
    - YOUTUBE_REFRESH_TOKEN

    Usage:
        # Auto-detect from environment
        host = VideoHostFactory.create_video_host()

        # Force mock for testing
        host = VideoHostFactory.create_video_host(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_video_host(
        cls,
        mode: VideoHostMode = "auto",
        oauth_manager: Optional[OAuthManager] = None,
    ) -> VideoHostInterface:
        """
        Create a video host instance.

        Args:
            mode: "auto" (from env), "youtube" (force real), "mock" (force sim)
            oauth_manager: Reuse an existing OAuth manager (shared with
                the credential refresher)

        Returns:
            VideoHostInterface implementation

        Raises:
            RuntimeError: If mode="youtube" but credentials not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Video Host (forced)")
            return MockVideoHost()

        if mode == "youtube":
            try:
                host = cls._create_youtube_host(oauth_manager)
                cls._logger.info("Creating YouTube Video Host (forced)")
                return host
            except Exception as e:
                raise RuntimeError(
                    f"YouTube video host requested but not available: {e}"
                ) from e

        # mode == "auto" - try YouTube first, fall back to mock
        try:
            host = cls._create_youtube_host(oauth_manager)
            cls._logger.info("Creating YouTube Video Host (auto-detected)")
            return host
        except ValueError as e:
            cls._logger.warning(
                f"YouTube video host not available ({e}), using Mock Video Host"
            )
            return MockVideoHost()

    @classmethod
    def create_oauth_manager(cls) -> OAuthManager:
        """
        Create an OAuth manager from settings.

        Raises:
            ValueError: If client id, secret or refresh token is missing
        """
        missing = [
            name
            for name in ("YOUTUBE_CLIENT_ID", "YOUTUBE_CLIENT_SECRET", "YOUTUBE_REFRESH_TOKEN")
            if not getattr(settings, name)
        ]
        if missing:
            raise ValueError(
                f"{', '.join(missing)} not set in environment. "
                "Add to .env file (see setup_youtube_auth.py for the refresh token)"
            )

        return OAuthManager(
            client_id=settings.YOUTUBE_CLIENT_ID,
            client_secret=settings.YOUTUBE_CLIENT_SECRET,
            refresh_token=settings.YOUTUBE_REFRESH_TOKEN,
        )

    @classmethod
    def _create_youtube_host(
        cls,
        oauth_manager: Optional[OAuthManager] = None,
    ) -> YouTubeVideoHost:
        """Create YouTube video host, building an OAuth manager if needed"""
        if oauth_manager is None:
            oauth_manager = cls.create_oauth_manager()
        elif not oauth_manager.is_configured():
            raise ValueError("OAuth manager is missing YouTube credentials")

        return YouTubeVideoHost(oauth_manager=oauth_manager)

    @classmethod
    def is_youtube_available(cls) -> bool:
        """
        Check if YouTube credentials are configured.

        Returns:
            True if client id, secret and refresh token are set
        """
        try:
            cls.create_oauth_manager()
            return True
        except ValueError:
            return False


# Convenience function for quick creation
def create_video_host(
    force_mock: bool = False,
    oauth_manager: Optional[OAuthManager] = None,
) -> VideoHostInterface:
    """
    Quick video host creation with simple mock override.

    Example:
        host = create_video_host()
        host = create_video_host(force_mock=True)
    """
    mode = "mock" if force_mock else "auto"
    return VideoHostFactory.create_video_host(mode=mode, oauth_manager=oauth_manager)
