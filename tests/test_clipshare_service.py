"""
Clip Share Service Wiring Tests

To run these tests:
    pytest tests/test_clipshare_service.py -v
"""

import io
import signal
from unittest.mock import patch

import pytest

import clipshare_service
from config import settings
from jobs.constants import JobStatus
from notify.implementations.mock_notifier import MockNotifier
from upload.implementations.mock_host import MockVideoHost
from upload.implementations.youtube_host import YouTubeVideoHost


@pytest.fixture
def no_signals():
    """Keep the service from replacing pytest's signal handlers"""
    with patch("clipshare_service.signal.signal") as register:
        yield register


@pytest.mark.unit
def test_service_without_credentials_uses_mocks(monkeypatch, no_signals):
    """
    Test development wiring.

    Should:
    - Fall back to mock host and notifier
    - Skip the credential refresher
    - Register SIGTERM and SIGINT handlers
    """
    monkeypatch.setattr(settings, "YOUTUBE_REFRESH_TOKEN", "")
    monkeypatch.setattr(settings, "DISCORD_BOT_TOKEN", "")

    service = clipshare_service.ClipShareService()

    assert isinstance(service.video_host, MockVideoHost)
    assert isinstance(service.notifier, MockNotifier)
    assert service.refresher is None
    registered = {call.args[0] for call in no_signals.call_args_list}
    assert registered == {signal.SIGTERM, signal.SIGINT}


@pytest.mark.unit
def test_service_with_credentials_shares_oauth(monkeypatch, no_signals):
    """Test the video host and refresher share one OAuth manager"""
    monkeypatch.setattr(settings, "YOUTUBE_CLIENT_ID", "client-id")
    monkeypatch.setattr(settings, "YOUTUBE_CLIENT_SECRET", "client-secret")
    monkeypatch.setattr(settings, "YOUTUBE_REFRESH_TOKEN", "refresh-token")
    monkeypatch.setattr(settings, "DISCORD_BOT_TOKEN", "")

    service = clipshare_service.ClipShareService()

    assert isinstance(service.video_host, YouTubeVideoHost)
    assert service.refresher is not None
    assert service.refresher.oauth_manager is service.video_host.oauth_manager


@pytest.mark.unit
def test_intake_feeds_orchestrator(monkeypatch, no_signals, tmp_path):
    """Test a submitted clip is picked up by the worker"""
    monkeypatch.setattr(settings, "YOUTUBE_REFRESH_TOKEN", "")
    monkeypatch.setattr(settings, "DISCORD_BOT_TOKEN", "")
    service = clipshare_service.ClipShareService()
    service.intake.temp_dir = tmp_path

    job = service.intake.submit(
        discord_user_id="111",
        discord_username="player",
        title="Ace",
        target_channel="999",
        video_stream=io.BytesIO(b"video"),
        original_filename="ace.mp4",
    )
    service.orchestrator.run_tick()

    assert service.ledger.get(job.job_id).status == JobStatus.PROCESSING
