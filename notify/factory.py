"""
Notifier Factory

Creates the Discord notifier when a bot token is configured,
otherwise a mock that only logs.
"""

import logging
from typing import Literal, Optional

from config import settings
from notify.implementations.discord_notifier import DiscordNotifier
from notify.implementations.mock_notifier import MockNotifier
from notify.interfaces.notifier_interface import NotifierInterface

# Type alias
NotifierMode = Literal["auto", "discord", "mock"]

_logger = logging.getLogger(__name__)


def create_notifier(
    mode: NotifierMode = "auto",
    bot_token: Optional[str] = None,
) -> NotifierInterface:
    """
    Create a notifier instance.

    Args:
        mode: "auto" (from env), "discord" (force real), "mock" (force sim)
        bot_token: Override DISCORD_BOT_TOKEN from settings

    Returns:
        NotifierInterface implementation

    Raises:
        RuntimeError: If mode="discord" but no bot token is configured

    Example:
        notifier = create_notifier()
        notifier.send_direct_message("1234", "hello")
    """
    token = bot_token if bot_token is not None else settings.DISCORD_BOT_TOKEN

    if mode == "mock":
        _logger.info("Creating Mock Notifier (forced)")
        return MockNotifier()

    if mode == "discord":
        if not token:
            raise RuntimeError("Discord notifier requested but DISCORD_BOT_TOKEN is not set")
        _logger.info("Creating Discord Notifier (forced)")
        return DiscordNotifier(bot_token=token, guild_id=settings.DISCORD_GUILD_ID)

    # mode == "auto"
    if token:
        _logger.info("Creating Discord Notifier (auto-detected)")
        return DiscordNotifier(bot_token=token, guild_id=settings.DISCORD_GUILD_ID)

    _logger.warning("DISCORD_BOT_TOKEN not set, using Mock Notifier")
    return MockNotifier()
