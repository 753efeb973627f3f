"""Domain entity representing a tenant."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Customer:
    """Organization whose users, notifications and templates are scoped together."""

    id: str | None
    name: str
    owner_id: str | None = None
    created_at: datetime | None = None
    deleted_at: datetime | None = None
