"""Field validation shared by the template use cases."""

from __future__ import annotations

from typing import Any

from backoffice.domain.constants import NotificationChannel
from backoffice.domain.exceptions import ValidationError

_CHANNELS = frozenset(member.value for member in NotificationChannel)


def normalize_title(title: Any) -> str:
    normalized = title.strip() if isinstance(title, str) else ""
    if not normalized:
        raise ValidationError("Template title cannot be empty")
    return normalized


def normalize_channel(channel: Any) -> str:
    value = channel.value if isinstance(channel, NotificationChannel) else channel
    if value not in _CHANNELS:
        raise ValidationError(
            f"Unknown notification channel: {value}", details={"allowed": sorted(_CHANNELS)}
        )
    return value


def normalize_comment(comment: str | None) -> str | None:
    if comment is None:
        return None
    return comment.strip() or None
