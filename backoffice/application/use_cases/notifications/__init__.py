"""Notification creation, read state and lookups."""

from .dispatcher import NotificationDispatcher, NotificationRequest
from .queries import (
    AdminNotificationFilters,
    NotificationFilters,
    clamp_page,
    get_notification,
    list_admin_notifications,
    list_notifications,
)
from .read_state import ReadStateTracker

__all__ = [
    "AdminNotificationFilters",
    "NotificationDispatcher",
    "NotificationFilters",
    "NotificationRequest",
    "ReadStateTracker",
    "clamp_page",
    "get_notification",
    "list_admin_notifications",
    "list_notifications",
]
