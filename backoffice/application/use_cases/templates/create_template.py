"""Use case for creating notification templates."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from backoffice.domain.entities import NotificationTemplate
from backoffice.domain.exceptions import ConflictError
from backoffice.domain.tags import normalize_tags
from backoffice.infrastructure.repositories import TemplateRepository
from backoffice.utils import EDITOR_POLICY, HtmlSanitizer

from .validators import normalize_channel, normalize_comment, normalize_title

logger = logging.getLogger(__name__)


def create_template(
    session: Session,
    *,
    title: str,
    message: str,
    types: Any,
    channel: str,
    comment: str | None = None,
    customer_id: str | None = None,
    sanitizer: HtmlSanitizer | None = None,
) -> NotificationTemplate:
    """Create a template; titles are unique per customer (or among globals)."""

    repository = TemplateRepository(session)
    normalized_title = normalize_title(title)
    if repository.get_by_title(normalized_title, customer_id=customer_id) is not None:
        raise ConflictError(
            "A notification template with this title already exists",
            details={"title": normalized_title},
        )

    template = NotificationTemplate(
        id=None,
        title=normalized_title,
        message=(sanitizer or HtmlSanitizer(EDITOR_POLICY)).sanitize(message),
        types=normalize_tags(types),
        channel=normalize_channel(channel),
        comment=normalize_comment(comment),
        customer_id=customer_id,
    )
    saved = repository.create(template)
    logger.info("Created notification template %s (%r)", saved.id, saved.title)
    return saved
