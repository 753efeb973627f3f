"""Use case for retrieving a notification template."""

from sqlalchemy.orm import Session

from backoffice.domain.entities import NotificationTemplate
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import TemplateRepository


def get_template(
    session: Session, template_id: str, *, customer_id: str | None = None
) -> NotificationTemplate:
    """Return the template or raise :class:`NotFoundError`.

    With ``customer_id`` a template owned by another customer is reported as
    missing; templates without a customer are visible to everyone.
    """

    template = TemplateRepository(session).get(template_id)
    if template is None or (
        customer_id is not None and template.customer_id not in (None, customer_id)
    ):
        raise NotFoundError("Notification template not found", details={"id": template_id})
    return template
