"""Enumerations and naming conventions shared across layers."""

from __future__ import annotations

from enum import Enum


class NotificationType(str, Enum):
    EMAIL = "email"
    IN_APP = "in_app"


class NotificationChannel(str, Enum):
    INFO = "info"
    ALERT = "alert"
    WARNING = "warning"
    ARTICLE = "article"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    INVITED = "invited"
    SUSPENDED = "suspended"
    DELETED = "deleted"


ROLE_SYSTEM_ADMIN = "system_admin"
ROLE_CUSTOMER_SUCCESS = "customer_success"
ROLE_STANDARD_USER = "standard_user"

NEW_NOTIFICATION_EVENT = "new"
UNREAD_COUNT_EVENT = "unread_count"


def main_notifications_channel(user_id: str) -> str:
    """Channel receiving every new in-app notification for ``user_id``."""

    return f"main-notifications:{user_id}"


def unread_notifications_channel(user_id: str) -> str:
    """Channel receiving the unread badge count for ``user_id``."""

    return f"unread-notifications:{user_id}"


__all__ = [
    "NotificationType",
    "NotificationChannel",
    "UserStatus",
    "ROLE_SYSTEM_ADMIN",
    "ROLE_CUSTOMER_SUCCESS",
    "ROLE_STANDARD_USER",
    "NEW_NOTIFICATION_EVENT",
    "UNREAD_COUNT_EVENT",
    "main_notifications_channel",
    "unread_notifications_channel",
]
