"""Normalization of notification type tags.

Notifications and templates carry a *set* of type tags. A single string is
accepted wherever a collection is expected and is treated as a one element
set. Tags are persisted as one delimited column (``",email,in_app,"``) so
that "contains tag" filters stay a plain ``LIKE`` on every backend.
"""

from __future__ import annotations

from collections.abc import Iterable

from .constants import NotificationType
from .exceptions import ValidationError

_DELIMITER = ","
_KNOWN_TAGS = frozenset(member.value for member in NotificationType)


def normalize_tags(values: str | NotificationType | Iterable[str] | None) -> frozenset[str]:
    """Return ``values`` as a validated, non-empty set of tag strings."""

    if values is None:
        raise ValidationError("At least one notification type is required")
    if isinstance(values, (str, NotificationType)):
        values = [values]

    tags = frozenset(
        value.value if isinstance(value, NotificationType) else str(value).strip()
        for value in values
    )
    if not tags:
        raise ValidationError("At least one notification type is required")
    unknown = sorted(tags - _KNOWN_TAGS)
    if unknown:
        raise ValidationError(
            "Unknown notification type(s): " + ", ".join(unknown),
            details={"allowed": sorted(_KNOWN_TAGS)},
        )
    return tags


def encode_tags(tags: Iterable[str]) -> str:
    """Serialize ``tags`` into their column representation."""

    ordered = sorted(set(tags))
    return f"{_DELIMITER}{_DELIMITER.join(ordered)}{_DELIMITER}" if ordered else ""


def decode_tags(raw: str | None) -> frozenset[str]:
    """Parse the column representation produced by :func:`encode_tags`."""

    if not raw:
        return frozenset()
    return frozenset(tag for tag in raw.split(_DELIMITER) if tag)


def tag_pattern(tag: str | NotificationType) -> str:
    """Return the ``LIKE`` pattern matching rows that carry ``tag``."""

    value = tag.value if isinstance(tag, NotificationType) else tag
    return f"%{_DELIMITER}{value}{_DELIMITER}%"


__all__ = ["normalize_tags", "encode_tags", "decode_tags", "tag_pattern"]
