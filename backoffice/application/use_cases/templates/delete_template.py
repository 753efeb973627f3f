"""Use case for soft-deleting notification templates."""

import logging

from sqlalchemy.orm import Session

from backoffice.domain.entities import NotificationTemplate
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import TemplateRepository
from backoffice.utils import utcnow

from .get_template import get_template

logger = logging.getLogger(__name__)


def delete_template(
    session: Session, template_id: str, *, customer_id: str | None = None
) -> NotificationTemplate:
    """Hide the template from every subsequent read and return it."""

    get_template(session, template_id, customer_id=customer_id)
    deleted = TemplateRepository(session).soft_delete(template_id, deleted_at=utcnow())
    if deleted is None:
        raise NotFoundError("Notification template not found", details={"id": template_id})
    logger.info("Deleted notification template %s", template_id)
    return deleted
