"""Outbound candidate notifications (email)."""

from hirepath.notifications.base import Notifier
from hirepath.notifications.factory import get_notifier, reset_notifier, set_notifier

__all__ = ["Notifier", "get_notifier", "reset_notifier", "set_notifier"]
