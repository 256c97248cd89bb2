"""
Notifications

Telegram alerts for strong signals.
"""

from cryptodash.services.notifications.telegram import TelegramClient
from cryptodash.services.notifications.notifier import (
    SignalNotifier,
    should_notify,
    format_signal_message,
)

__all__ = [
    "TelegramClient",
    "SignalNotifier",
    "should_notify",
    "format_signal_message",
]
