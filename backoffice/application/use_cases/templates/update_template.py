"""Use case for partially updating notification templates."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from backoffice.domain.entities import NotificationTemplate, TemplateChanges
from backoffice.domain.exceptions import ConflictError, NotFoundError
from backoffice.domain.tags import normalize_tags
from backoffice.infrastructure.repositories import TemplateRepository
from backoffice.utils import EDITOR_POLICY, HtmlSanitizer, utcnow

from .get_template import get_template
from .validators import normalize_channel, normalize_comment, normalize_title

logger = logging.getLogger(__name__)


def update_template(
    session: Session,
    template_id: str,
    changes: TemplateChanges,
    *,
    customer_id: str | None = None,
    sanitizer: HtmlSanitizer | None = None,
) -> NotificationTemplate:
    """Apply the fields explicitly set on ``changes``.

    Only provided fields are written; ``comment=None`` clears the comment.
    The message is sanitized again whenever it is provided.
    """

    current = get_template(session, template_id, customer_id=customer_id)
    repository = TemplateRepository(session)
    provided = changes.provided()

    values: dict = {}
    if "title" in provided:
        title = normalize_title(provided["title"])
        duplicate = repository.get_by_title(title, customer_id=current.customer_id)
        if duplicate is not None and duplicate.id != current.id:
            raise ConflictError(
                "A notification template with this title already exists",
                details={"title": title},
            )
        values["title"] = title
    if "message" in provided:
        values["message"] = (sanitizer or HtmlSanitizer(EDITOR_POLICY)).sanitize(
            provided["message"]
        )
    if "comment" in provided:
        values["comment"] = normalize_comment(provided["comment"])
    if "types" in provided:
        values["types"] = normalize_tags(provided["types"])
    if "channel" in provided:
        values["channel"] = normalize_channel(provided["channel"])

    if not values:
        return current

    values["updated_at"] = utcnow()
    updated = repository.update(template_id, values)
    if updated is None:
        raise NotFoundError("Notification template not found", details={"id": template_id})
    logger.info("Updated notification template %s: %s", template_id, sorted(values))
    return updated
