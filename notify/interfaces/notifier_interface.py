"""
Notifier Interface

Abstract interface for chat notification implementations.
The upload worker depends on this abstraction, not on the Discord API.
"""

from abc import ABC, abstractmethod


class NotifierInterface(ABC):
    """
    Abstract base class for notifiers.

    Implementations must never raise: delivery failures are logged and
    reported through the boolean return value, so a notification can never
    change the outcome of a job.
    """

    @abstractmethod
    def send_direct_message(self, user_id: str, text: str) -> bool:
        """
        Send a private message to a user.

        Args:
            user_id: Chat platform user id
            text: Message body

        Returns:
            True if the message was delivered
        """

    @abstractmethod
    def post_channel_message(
        self,
        channel_id: str,
        text: str,
        ping_all: bool = False,
    ) -> bool:
        """
        Post a message to a channel.

        Args:
            channel_id: Target channel id
            text: Message body
            ping_all: Prefix the message with an @here mention

        Returns:
            True if the message was posted
        """

    def close(self) -> None:
        """Release any held connections (optional)"""


class NotificationError(Exception):
    """A chat API request failed (always caught inside the notifier)"""
