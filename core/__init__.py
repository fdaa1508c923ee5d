"""
Core background workers.

Public API:
    - UploadOrchestrator: Drives jobs from queued to completed/failed
    - CredentialRefresher: Keeps the YouTube OAuth grant fresh
    - processing_wait_seconds: Backoff schedule for processing checks

Usage:
    from core import UploadOrchestrator

    orchestrator = UploadOrchestrator(ledger, video_host, notifier)
    orchestrator.start()
"""

from core.backoff import is_check_due, processing_wait_seconds
from core.token_refresher import CredentialRefresher
from core.upload_orchestrator import UploadOrchestrator

__all__ = [
    "CredentialRefresher",
    "UploadOrchestrator",
    "is_check_due",
    "processing_wait_seconds",
]
