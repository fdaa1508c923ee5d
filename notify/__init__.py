"""
Notify Module

Discord notifications for the clip pipeline: status DMs to the uploader
and the final post in the target channel.

Public API:
    - NotifierInterface: Contract the upload worker depends on
    - create_notifier: Factory function

Usage:
    from notify import create_notifier

    notifier = create_notifier()
    notifier.post_channel_message(channel_id, "New clip!", ping_all=True)
"""

from notify.factory import create_notifier
from notify.interfaces.notifier_interface import NotificationError, NotifierInterface

__all__ = [
    "NotificationError",
    "NotifierInterface",
    "create_notifier",
]
