"""Read-only notification lookups for recipients and administrators."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.config import get_settings
from backoffice.domain.entities import Notification, Page
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import NotificationRepository


@dataclass
class NotificationFilters:
    page: int = 1
    per_page: int | None = None
    type: str | None = None
    is_read: bool | None = None
    channel: str | None = None


@dataclass
class AdminNotificationFilters:
    page: int = 1
    per_page: int | None = None
    user_ids: Sequence[str] | None = None
    customer_ids: Sequence[str] | None = None
    sender_ids: Sequence[str] | None = None
    types: Sequence[str] | None = None
    is_read: bool | None = None
    channels: Sequence[str] | None = None
    search: str | None = None


def clamp_page(page: int | None, per_page: int | None) -> tuple[int, int]:
    """Return a valid ``(page, per_page)`` pair using configured defaults."""

    settings = get_settings()
    size = per_page or settings.default_page_size
    size = max(1, min(size, settings.max_page_size))
    return max(1, page or 1), size


def get_notification(session: Session, user_id: str, notification_id: str) -> Notification:
    """Return the notification only when ``user_id`` is its recipient."""

    notification = NotificationRepository(session).get_for_user(notification_id, user_id=user_id)
    if notification is None:
        raise NotFoundError("Notification not found", details={"id": notification_id})
    return notification


def list_notifications(
    session: Session, user_id: str, filters: NotificationFilters | None = None
) -> Page[Notification]:
    filters = filters or NotificationFilters()
    page, per_page = clamp_page(filters.page, filters.per_page)
    return NotificationRepository(session).list_for_user(
        user_id,
        page=page,
        per_page=per_page,
        type_tag=filters.type,
        is_read=filters.is_read,
        channel=filters.channel,
    )


def list_admin_notifications(
    session: Session, filters: AdminNotificationFilters | None = None
) -> Page[Notification]:
    """Return every notification matching ``filters``, newest first.

    Tag filters require all listed tags; search matches title, message or
    ``generated_by`` case-insensitively.
    """

    filters = filters or AdminNotificationFilters()
    page, per_page = clamp_page(filters.page, filters.per_page)
    return NotificationRepository(session).list_all(
        page=page,
        per_page=per_page,
        user_ids=filters.user_ids,
        customer_ids=filters.customer_ids,
        sender_ids=filters.sender_ids,
        type_tags=filters.types,
        is_read=filters.is_read,
        channels=filters.channels,
        search=filters.search,
    )


__all__ = [
    "AdminNotificationFilters",
    "NotificationFilters",
    "clamp_page",
    "get_notification",
    "list_admin_notifications",
    "list_notifications",
]
