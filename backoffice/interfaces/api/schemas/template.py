"""Schemas for notification template endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from backoffice.domain.constants import NotificationChannel, NotificationType
from backoffice.domain.entities import TemplateChanges

from .notification import PaginationMeta


class TemplateCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    comment: str | None = Field(default=None, max_length=500)
    type: list[NotificationType] = Field(..., min_length=1)
    channel: NotificationChannel
    customer_id: str | None = None


class TemplateUpdate(BaseModel):
    """Partial update; only the fields present in the request body are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    message: str | None = None
    comment: str | None = Field(default=None, max_length=500)
    type: list[NotificationType] | None = Field(default=None, min_length=1)
    channel: NotificationChannel | None = None

    def to_changes(self) -> TemplateChanges:
        values = self.model_dump(exclude_unset=True)
        if "type" in values:
            values["types"] = values.pop("type")
        return TemplateChanges.from_mapping(values)


class TemplateRead(BaseModel):
    id: str
    title: str
    message: str
    comment: str | None = None
    type: list[str]
    channel: str
    customer_id: str | None = None
    customer_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TemplatePage(BaseModel):
    data: list[TemplateRead]
    meta: PaginationMeta


class TemplateSendRequest(BaseModel):
    user_ids: list[str] | None = None
    customer_id: str | None = None


__all__ = [
    "TemplateCreate",
    "TemplatePage",
    "TemplateRead",
    "TemplateSendRequest",
    "TemplateUpdate",
]
