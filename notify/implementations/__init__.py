"""
Implementations Package

Concrete notifier implementations.
"""

from notify.implementations.discord_notifier import DiscordNotifier
from notify.implementations.mock_notifier import MockNotifier, SentMessage

__all__ = [
    "DiscordNotifier",
    "MockNotifier",
    "SentMessage",
]
