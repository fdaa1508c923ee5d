"""
Credential Refresher

Keeps the YouTube OAuth grant alive by refreshing it on a fixed schedule:
wait `warmup` after startup, then refresh every `period`.

If Google rotates the refresh token, the new one is logged (prefix only) and
written to a side file so the operator can update .env. The running process
keeps using the token it was started with.
"""

import logging
import threading
from datetime import timedelta
from pathlib import Path
from typing import Optional

from config.settings import (
    TOKEN_LOG_PATH,
    TOKEN_REFRESH_INTERVAL_HOURS,
    TOKEN_REFRESH_WARMUP_HOURS,
)
from jobs.models.job_record import utc_now
from upload.auth.oauth_manager import OAuthManager

# Characters of a new refresh token shown in the logs
TOKEN_PREVIEW_LENGTH = 20


class CredentialRefresher:
    """
    Background loop around OAuthManager.refresh().

    Refresh errors are logged and the loop waits for the next period.
    Waits use the stop event, so stop() interrupts them immediately.
    """

    def __init__(
        self,
        oauth_manager: OAuthManager,
        period: timedelta = timedelta(hours=TOKEN_REFRESH_INTERVAL_HOURS),
        warmup: timedelta = timedelta(hours=TOKEN_REFRESH_WARMUP_HOURS),
        token_log_path: Path = TOKEN_LOG_PATH,
    ):
        self.logger = logging.getLogger(__name__)
        self.oauth_manager = oauth_manager
        self.period = period
        self.warmup = warmup
        self.token_log_path = Path(token_log_path)

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background refresh thread"""
        if self.is_running:
            self.logger.warning("Credential refresher already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="CredentialRefresher",
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the refresh thread"""
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            self.logger.info("Waiting for credential refresher to stop...")
            self._thread.join(timeout=timeout)

    def _run_loop(self) -> None:
        self.logger.info(
            f"Credential refresher started (first refresh in {self.warmup}, "
            f"then every {self.period})",
        )

        # wait() returns True once stop is requested
        if self._stop_event.wait(self.warmup.total_seconds()):
            self.logger.info("Credential refresher stopped")
            return

        while True:
            self.refresh_once()

            self.logger.info(f"Next YouTube token refresh in {self.period}")
            if self._stop_event.wait(self.period.total_seconds()):
                break

        self.logger.info("Credential refresher stopped")

    def refresh_once(self) -> bool:
        """
        Refresh the access token now.

        Returns:
            True if the refresh succeeded
        """
        if not self.oauth_manager.refresh_token:
            self.logger.warning("No refresh token configured, skipping token refresh")
            return False

        self.logger.info("Refreshing YouTube access token...")

        try:
            new_refresh_token = self.oauth_manager.refresh()
        except Exception as e:
            self.logger.error(f"❌ Failed to refresh YouTube token: {e}", exc_info=True)
            return False

        self.logger.info(
            f"✅ YouTube access token refreshed (expires {self.oauth_manager.expiry})",
        )

        if new_refresh_token:
            self._record_new_refresh_token(new_refresh_token)
        else:
            self.logger.info("No new refresh token provided (existing token still valid)")

        return True

    def _record_new_refresh_token(self, token: str) -> None:
        """Log a rotated refresh token and write it to the side file"""
        self.logger.warning(
            "New YouTube refresh token received. The running service keeps the "
            "current one; update YOUTUBE_REFRESH_TOKEN in .env before the next restart. "
            f"New token (first {TOKEN_PREVIEW_LENGTH} chars): "
            f"{token[:TOKEN_PREVIEW_LENGTH]}...",
        )

        received_at = utc_now().strftime("%Y-%m-%d %H:%M:%S")
        content = (
            f"New refresh token received at {received_at} UTC\n"
            f"Token: {token}\n"
            "\n"
            "To update:\n"
            "1. Set YOUTUBE_REFRESH_TOKEN to the token above in .env\n"
            "2. Restart the service\n"
        )

        try:
            self.token_log_path.parent.mkdir(parents=True, exist_ok=True)
            self.token_log_path.write_text(content, encoding="utf-8")
            self.logger.info(f"New token details written to: {self.token_log_path}")
        except OSError as e:
            self.logger.error(f"Failed to write new refresh token file: {e}")
