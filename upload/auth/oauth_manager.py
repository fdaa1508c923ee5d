"""
OAuth Manager

Handles Google OAuth 2.0 authentication for YouTube API.
Uses a stored refresh token for automated, long-lived authentication.

Flow:
1. Initial setup: Run setup_youtube_auth.py once to obtain a refresh token
2. Runtime: This class builds credentials from client id/secret + refresh token
3. Token refresh: On demand when the access token is missing or expired,
   and proactively by the credential refresher loop
"""

import logging
import threading
from datetime import datetime
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from upload.constants import GOOGLE_TOKEN_URI, YOUTUBE_SCOPES


class OAuthManager:
    """
    Manages Google OAuth 2.0 credentials for the shared YouTube channel.

    This class:
    - Builds credentials from the configured refresh token
    - Never hands out an expired access token (refreshes first)
    - Exposes an explicit refresh for the background refresher
    - Serialises refreshes, since the worker and refresher share it
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
    ):
        """
        Initialize OAuth manager.

        Args:
            client_id: OAuth client id from Google Cloud Console
            client_secret: OAuth client secret
            refresh_token: Long-lived refresh token (see setup_youtube_auth.py)

        Example:
            oauth = OAuthManager(
                client_id=settings.YOUTUBE_CLIENT_ID,
                client_secret=settings.YOUTUBE_CLIENT_SECRET,
                refresh_token=settings.YOUTUBE_REFRESH_TOKEN,
            )
        """
        self.logger = logging.getLogger(__name__)
        self.client_id = client_id
        self.client_secret = client_secret
        self._lock = threading.Lock()
        self.credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=client_id,
            client_secret=client_secret,
            scopes=YOUTUBE_SCOPES,
        )

        self.logger.info("OAuth Manager initialized")

    @property
    def refresh_token(self) -> Optional[str]:
        """Refresh token currently in use"""
        return self.credentials.refresh_token

    @property
    def expiry(self) -> Optional[datetime]:
        """Access token expiry (naive UTC, as google-auth reports it)"""
        return self.credentials.expiry

    def is_configured(self) -> bool:
        """Check that client id, secret and refresh token are all present"""
        return bool(self.client_id and self.client_secret and self.refresh_token)

    def get_credentials(self) -> Credentials:
        """
        Get valid OAuth credentials.

        Refreshes first if there is no access token yet or it has expired.

        Returns:
            Valid Google OAuth credentials

        Raises:
            RuntimeError: If no refresh token is configured
            google.auth.exceptions.RefreshError: If Google rejects the refresh
        """
        with self._lock:
            if not self.credentials.valid:
                self.logger.debug("Access token missing or expired, refreshing...")
                self._refresh_locked()
            return self.credentials

    def refresh(self) -> Optional[str]:
        """
        Force an access token refresh.

        Returns:
            The new refresh token if Google rotated it, otherwise None

        Raises:
            RuntimeError: If no refresh token is configured
            google.auth.exceptions.RefreshError: If Google rejects the refresh
        """
        with self._lock:
            previous = self.credentials.refresh_token
            self._refresh_locked()
            current = self.credentials.refresh_token

        if current and current != previous:
            return current
        return None

    def is_authenticated(self) -> bool:
        """
        Check if currently authenticated with valid credentials.

        Returns:
            True if credentials are valid
        """
        try:
            creds = self.get_credentials()
            return creds is not None and creds.valid
        except Exception:
            return False

    def _refresh_locked(self) -> None:
        """Exchange the refresh token for a new access token (lock held)"""
        if not self.credentials.refresh_token:
            raise RuntimeError(
                "No YouTube refresh token configured. "
                "Run 'python setup_youtube_auth.py' and set YOUTUBE_REFRESH_TOKEN",
            )
        self.credentials.refresh(Request())
        self.logger.debug(f"Access token refreshed (expires {self.credentials.expiry})")


def run_initial_auth(
    client_secret_path: str,
    port: int = 8080,
) -> Optional[str]:
    """
    Run initial OAuth authentication flow.

    This is a standalone function for the setup script.
    Opens browser for the channel owner to grant permissions.

    Args:
        client_secret_path: Path to client_secret.json
        port: Local port for OAuth callback (default: 8080)

    Returns:
        The refresh token, or None if authentication failed

    Example:
        token = run_initial_auth("credentials/client_secret.json")
    """
    logger = logging.getLogger(__name__)

    try:
        # Create flow from client secrets
        flow = InstalledAppFlow.from_client_secrets_file(
            client_secret_path,
            YOUTUBE_SCOPES,
        )

        logger.info(f"Starting OAuth flow on port {port}...")
        logger.info("A browser window will open for authentication")

        # offline + consent so Google always returns a refresh token
        credentials = flow.run_local_server(
            port=port,
            access_type="offline",
            prompt="consent",
        )

        if not credentials.refresh_token:
            logger.error("Google did not return a refresh token")
            return None

        logger.info("✅ Authentication successful!")
        return credentials.refresh_token

    except Exception as e:
        logger.error(f"Authentication failed: {e}")
        return None
