"""Domain entities representing notification templates."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any


class _Unset:
    """Marker for a field the caller did not provide."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class NotificationTemplate:
    """Reusable message blueprint resolved into notifications at send time."""

    id: str | None
    title: str
    message: str
    types: frozenset[str]
    channel: str
    comment: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class TemplateChanges:
    """Partial update for a template.

    Fields left as :data:`UNSET` are not touched. ``comment=None`` clears the
    comment, which is why ``None`` cannot double as "not provided".
    """

    title: Any = UNSET
    message: Any = UNSET
    comment: Any = UNSET
    types: Any = UNSET
    channel: Any = UNSET

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "TemplateChanges":
        """Build changes from a mapping that only holds the provided keys."""

        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

    def provided(self) -> dict[str, Any]:
        """Return the explicitly provided fields and their new values."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not UNSET
        }


__all__ = ["NotificationTemplate", "TemplateChanges", "UNSET"]
