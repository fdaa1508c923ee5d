"""
Mock Notifier Implementation

Records messages instead of sending them.
Used by tests and when no Discord bot token is configured.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from notify.interfaces.notifier_interface import NotifierInterface
from notify.messages import with_here_ping


@dataclass
class SentMessage:
    """A message captured by MockNotifier"""

    kind: str  # "dm" or "channel"
    target_id: str
    text: str
    ping_all: bool = False
    delivered: bool = True


class MockNotifier(NotifierInterface):
    """
    Mock notifier for testing.

    Every attempt is recorded, including failed ones, so tests can count
    delivery attempts independently of the outcome.
    """

    def __init__(self, fail_dms: bool = False, fail_channel_posts: bool = False):
        """
        Initialize mock notifier.

        Args:
            fail_dms: Report every DM as undelivered
            fail_channel_posts: Report every channel post as undelivered
        """
        self.logger = logging.getLogger(__name__)
        self.fail_dms = fail_dms
        self.fail_channel_posts = fail_channel_posts
        self.messages: List[SentMessage] = []

        self.logger.info("Mock Notifier initialized")

    def send_direct_message(self, user_id: str, text: str) -> bool:
        delivered = not self.fail_dms
        self.messages.append(SentMessage("dm", user_id, text, delivered=delivered))
        self.logger.info(f"[MOCK] DM to {user_id} ({'sent' if delivered else 'failed'}): {text}")
        return delivered

    def post_channel_message(
        self,
        channel_id: str,
        text: str,
        ping_all: bool = False,
    ) -> bool:
        content = with_here_ping(text) if ping_all else text
        delivered = not self.fail_channel_posts and bool(channel_id)
        self.messages.append(
            SentMessage("channel", channel_id, content, ping_all=ping_all, delivered=delivered)
        )
        self.logger.info(
            f"[MOCK] Channel post to {channel_id} ({'sent' if delivered else 'failed'}): {content}"
        )
        return delivered

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    @property
    def direct_messages(self) -> List[SentMessage]:
        return [m for m in self.messages if m.kind == "dm"]

    @property
    def channel_messages(self) -> List[SentMessage]:
        return [m for m in self.messages if m.kind == "channel"]

    def get_last_message(self) -> Optional[SentMessage]:
        return self.messages[-1] if self.messages else None

    def clear_history(self) -> None:
        self.messages.clear()
