"""
Discord Notifier Implementation

Sends DMs and channel posts through the Discord REST API (v10)
using the bot token.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from config.settings import DISCORD_API_BASE, DISCORD_HTTP_TIMEOUT, DISCORD_TEXT_CHANNEL_TYPE
from notify.interfaces.notifier_interface import NotificationError, NotifierInterface
from notify.messages import with_here_ping


class DiscordNotifier(NotifierInterface):
    """
    Discord bot notifier.

    DMs take two calls: open (or reuse) the DM channel with the user,
    then post the message into it.

    Every public method logs and returns False on failure instead of raising.
    """

    def __init__(
        self,
        bot_token: str,
        api_base: str = DISCORD_API_BASE,
        timeout: float = DISCORD_HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
        guild_id: str = "",
    ):
        """
        Initialize Discord notifier.

        Args:
            bot_token: Discord bot token (from .env)
            api_base: REST API base URL
            timeout: Per-request timeout in seconds
            session: Existing requests session (tests inject a mock)
            guild_id: Guild whose channels list_text_channels() returns
        """
        self.logger = logging.getLogger(__name__)
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.guild_id = guild_id

        if not bot_token:
            self.logger.warning("Discord bot token not configured, messages will not be sent")
        else:
            self.logger.info("Discord Notifier initialized")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bot {self.bot_token}",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        return self._send(self.session.post, path, json=payload)

    def _get(self, path: str) -> Any:
        return self._send(self.session.get, path)

    def _send(self, send: Callable[..., requests.Response], path: str, **kwargs: Any) -> Any:
        """
        Call the Discord API and decode the JSON body.

        Raises:
            NotificationError: On transport errors or non-2xx responses
        """
        url = f"{self.api_base}/{path.lstrip('/')}"
        try:
            response = send(
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise NotificationError(f"Request to {path} failed: {e}") from e

        if not response.ok:
            raise NotificationError(
                f"Discord API {path} returned {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError:
            return {}

    def send_direct_message(self, user_id: str, text: str) -> bool:
        if not self.bot_token:
            self.logger.warning(f"Cannot DM user {user_id}: bot token not configured")
            return False

        try:
            dm_channel = self._post("users/@me/channels", {"recipient_id": user_id})
            channel_id = dm_channel.get("id")
            if not channel_id:
                raise NotificationError("DM channel response has no id")

            self._post(f"channels/{channel_id}/messages", {"content": text})

        except NotificationError as e:
            self.logger.error(f"❌ Failed to send DM to user {user_id}: {e}")
            return False

        self.logger.info(f"Sent DM to user {user_id}")
        return True

    def post_channel_message(
        self,
        channel_id: str,
        text: str,
        ping_all: bool = False,
    ) -> bool:
        if not self.bot_token:
            self.logger.warning(f"Cannot post to channel {channel_id}: bot token not configured")
            return False

        if not channel_id:
            self.logger.warning("Cannot post message: channel id is empty")
            return False

        content = with_here_ping(text) if ping_all else text

        try:
            self._post(f"channels/{channel_id}/messages", {"content": content})
        except NotificationError as e:
            self.logger.error(f"❌ Failed to post to channel {channel_id}: {e}")
            return False

        self.logger.info(f"Posted message to channel {channel_id} (ping: {ping_all})")
        return True

    def list_text_channels(self, guild_id: Optional[str] = None) -> List[Dict[str, str]]:
        """
        List the guild's text channels a clip can be published to.

        Only text channels (type 0) whose name contains a dash are
        returned, which matches the server's clip channel naming.

        Args:
            guild_id: Guild to list (defaults to the configured guild)

        Returns:
            [{"id": ..., "name": ...}] sorted by name, empty on failure

        Example:
            for channel in notifier.list_text_channels():
                print(channel["name"], channel["id"])
        """
        guild = guild_id or self.guild_id
        if not self.bot_token or not guild:
            self.logger.warning("Cannot list channels: bot token or guild id not configured")
            return []

        try:
            channels = self._get(f"guilds/{guild}/channels")
        except NotificationError as e:
            self.logger.error(f"❌ Failed to list channels for guild {guild}: {e}")
            return []

        text_channels = [
            {"id": str(c["id"]), "name": c["name"]}
            for c in channels or []
            if c.get("type") == DISCORD_TEXT_CHANNEL_TYPE and "-" in c.get("name", "")
        ]
        return sorted(text_channels, key=lambda c: c["name"])

    def close(self) -> None:
        self.session.close()
