"""Notifier singleton.

Tests inject a fake with ``set_notifier`` and restore the default with
``reset_notifier``.
"""

from hirepath.notifications.base import Notifier
from hirepath.notifications.resend_notifier import ResendNotifier

_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """Return the process-wide notifier, creating the default on first use."""
    global _notifier
    if _notifier is None:
        _notifier = ResendNotifier()
    return _notifier


def set_notifier(notifier: Notifier) -> None:
    """Replace the process-wide notifier."""
    global _notifier
    _notifier = notifier


def reset_notifier() -> None:
    """Drop the current notifier so the default is rebuilt on next use."""
    global _notifier
    _notifier = None
