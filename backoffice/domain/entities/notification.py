"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Notification:
    """One delivery of a message to exactly one recipient.

    ``read_at`` is the only read ledger: ``None`` means unread. ``is_read``
    is derived from it and cannot be set independently.
    """

    id: str | None
    user_id: str
    title: str
    message: str
    types: frozenset[str]
    channel: str | None = None
    customer_id: str | None = None
    sender_id: str | None = None
    template_id: str | None = None
    metadata: dict[str, Any] | None = None
    generated_by: str | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None
    user_email: str | None = field(default=None, compare=False)
    user_full_name: str | None = field(default=None, compare=False)
    customer_name: str | None = field(default=None, compare=False)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


__all__ = ["Notification"]
