"""Use case for listing notification templates."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from backoffice.application.use_cases.notifications import clamp_page
from backoffice.domain.entities import NotificationTemplate, Page
from backoffice.infrastructure.repositories import TemplateRepository


def list_templates(
    session: Session,
    *,
    page: int = 1,
    per_page: int | None = None,
    customer_id: str | None = None,
    include_global: bool = True,
    types: Sequence[str] | None = None,
    channels: Sequence[str] | None = None,
) -> Page[NotificationTemplate]:
    page, per_page = clamp_page(page, per_page)
    return TemplateRepository(session).list(
        page=page,
        per_page=per_page,
        customer_id=customer_id,
        include_global=include_global,
        type_tags=types,
        channels=channels,
    )
