"""
Clip Share Service

Main service coordinator for the Discord → YouTube clip pipeline.
Wires the job ledger, intake, video host, notifier and the two background
workers together, then runs until a shutdown signal arrives.

Architecture:
- In-memory job ledger shared by intake and the worker
- Upload orchestrator thread (ticks every few seconds)
- Credential refresher thread (daily YouTube token refresh)
- Mock video host / notifier when credentials are missing (development)

Job Flow:
    QUEUED → UPLOADING → PROCESSING → COMPLETED
       ↓          ↓            ↓
       +----------+------------+----→ FAILED (uploader gets a DM)
"""

import logging
import logging.handlers
import signal
import sys
import time
from pathlib import Path
from typing import Optional

from config.settings import LOG_DIR, LOG_SERVICE_FILE, UPLOAD_TEMP_PATH
from core import CredentialRefresher, UploadOrchestrator
from jobs import InMemoryJobLedger, JobIntake
from notify import create_notifier
from upload import VideoHostFactory
from upload.auth.oauth_manager import OAuthManager


class ClipShareService:
    """
    Main service that coordinates all components.

    Usage:
        service = ClipShareService()
        job = service.intake.submit(...)  # from the web layer
        service.run()  # Blocks until shutdown
    """

    def __init__(self):
        """Initialize components and register signal handlers."""
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Clip Share Service...")

        self.running = False

        # Job storage and intake
        self.ledger = InMemoryJobLedger()
        self.intake = JobIntake(self.ledger, temp_dir=UPLOAD_TEMP_PATH)

        # YouTube credentials (shared by video host and refresher)
        self.oauth_manager: Optional[OAuthManager] = None
        if VideoHostFactory.is_youtube_available():
            self.oauth_manager = VideoHostFactory.create_oauth_manager()
        else:
            self.logger.warning("YouTube credentials not configured")

        self.video_host = VideoHostFactory.create_video_host(
            mode="youtube" if self.oauth_manager else "mock",
            oauth_manager=self.oauth_manager,
        )
        self.notifier = create_notifier()

        # Background workers
        self.orchestrator = UploadOrchestrator(
            ledger=self.ledger,
            video_host=self.video_host,
            notifier=self.notifier,
        )
        self.refresher: Optional[CredentialRefresher] = None
        if self.oauth_manager:
            self.refresher = CredentialRefresher(self.oauth_manager)

        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info("Clip Share Service initialized successfully")

    def run(self):
        """
        Main service loop.

        Starts the background workers and waits for a shutdown signal.
        """
        self.running = True
        self.logger.info("Starting Clip Share Service...")

        self.orchestrator.start()
        if self.refresher:
            self.refresher.start()

        try:
            while self.running:
                time.sleep(1.0)
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    # =========================================================================
    # SHUTDOWN HANDLING
    # =========================================================================

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False

    def _shutdown(self):
        """
        Graceful shutdown.

        Stops both workers; an upload in flight is abandoned between chunks.
        """
        self.logger.info("Shutting down Clip Share Service...")

        self.orchestrator.stop()
        if self.refresher:
            self.refresher.stop()

        self.notifier.close()

        pending = len(self.ledger.list_pending())
        if pending:
            self.logger.warning(f"{pending} job(s) still pending at shutdown (in-memory, lost)")

        self.logger.info("Clip Share Service shutdown complete")


def setup_logging():
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    # Create logger
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    log_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    # File handler with rotation
    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
    except OSError as e:
        # Console only if the log directory is not writable
        logger.warning(f"Cannot write to {log_file} ({e}), logging to console only")
        return

    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)


def main():
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    # Setup logging
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Clip Share Service Starting")
    logger.info("=" * 60)

    # Create and run service
    try:
        service = ClipShareService()
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
