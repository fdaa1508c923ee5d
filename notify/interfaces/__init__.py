"""
Interfaces Package

Abstract interfaces for notifier implementations.
"""

from notify.interfaces.notifier_interface import NotificationError, NotifierInterface

__all__ = [
    "NotificationError",
    "NotifierInterface",
]
