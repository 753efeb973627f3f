"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from backoffice.domain.constants import NotificationChannel, NotificationType


class PaginationMeta(BaseModel):
    total: int
    last_page: int
    current_page: int
    per_page: int
    prev: int | None = None
    next: int | None = None


class NotificationCreate(BaseModel):
    """Payload used by administrators to create a notification."""

    model_config = ConfigDict(extra="forbid")

    user_id: str | None = None
    customer_id: str | None = None
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: list[NotificationType] | NotificationType = NotificationType.IN_APP
    channel: NotificationChannel | None = None
    template_id: str | None = None
    metadata: dict[str, Any] | None = None


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str
    customer_id: str | None = None
    sender_id: str | None = None
    template_id: str | None = None
    type: list[str]
    title: str
    message: str
    channel: str | None = None
    metadata: dict[str, Any] | None = None
    generated_by: str | None = None
    is_read: bool
    created_at: datetime | None = None
    read_at: datetime | None = None
    user_email: str | None = None
    user_full_name: str | None = None
    customer_name: str | None = None


class NotificationPage(BaseModel):
    data: list[NotificationRead]
    meta: PaginationMeta


class UnreadCountRead(BaseModel):
    count: int


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "MessageResponse",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationPage",
    "NotificationRead",
    "PaginationMeta",
    "UnreadCountRead",
]
