"""Persistence layer for notification templates."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from backoffice.domain.entities import NotificationTemplate, Page
from backoffice.domain.tags import decode_tags, encode_tags, tag_pattern
from backoffice.infrastructure.models import NotificationTemplateModel
from backoffice.utils import ensure_utc

from ._session import commit


class TemplateRepository:
    """Provide CRUD operations for templates.

    Soft-deleted rows (``deleted_at`` set) are invisible to every method.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, template_id: str, *, customer_id: str | None = None) -> NotificationTemplate | None:
        query = self._active_query().filter(NotificationTemplateModel.id == template_id)
        if customer_id is not None:
            query = query.filter(NotificationTemplateModel.customer_id == customer_id)
        model = query.first()
        return self._to_entity(model) if model else None

    def get_by_title(self, title: str, *, customer_id: str | None) -> NotificationTemplate | None:
        query = self._active_query().filter(
            func.lower(NotificationTemplateModel.title) == title.strip().lower()
        )
        if customer_id is None:
            query = query.filter(NotificationTemplateModel.customer_id.is_(None))
        else:
            query = query.filter(NotificationTemplateModel.customer_id == customer_id)
        model = query.first()
        return self._to_entity(model) if model else None

    def list(
        self,
        *,
        page: int,
        per_page: int,
        customer_id: str | None = None,
        include_global: bool = False,
        type_tags: Iterable[str] | None = None,
        channels: Sequence[str] | None = None,
    ) -> Page[NotificationTemplate]:
        """Return active templates, newest first.

        With ``include_global`` a customer scope also matches templates that
        belong to no customer. Tag filters match templates carrying any tag.
        """

        query = self._active_query()
        if customer_id is not None:
            owned = NotificationTemplateModel.customer_id == customer_id
            if include_global:
                owned = or_(owned, NotificationTemplateModel.customer_id.is_(None))
            query = query.filter(owned)
        tags = list(type_tags or ())
        if tags:
            query = query.filter(
                or_(*(NotificationTemplateModel.types.like(tag_pattern(tag)) for tag in tags))
            )
        if channels:
            query = query.filter(NotificationTemplateModel.channel.in_(tuple(channels)))

        total = query.with_entities(func.count(NotificationTemplateModel.id)).scalar() or 0
        result: Page[NotificationTemplate] = Page(total=total, page=page, per_page=per_page)
        models = (
            query.order_by(
                NotificationTemplateModel.created_at.desc(), NotificationTemplateModel.id.desc()
            )
            .offset(result.offset)
            .limit(per_page)
            .all()
        )
        result.items = [self._to_entity(model) for model in models]
        return result

    def create(self, template: NotificationTemplate) -> NotificationTemplate:
        model = NotificationTemplateModel(
            title=template.title,
            message=template.message,
            comment=template.comment,
            types=encode_tags(template.types),
            channel=template.channel,
            customer_id=template.customer_id,
        )
        if template.id:
            model.id = template.id
        self.session.add(model)
        commit(self.session, action="create notification template")
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, template_id: str, values: dict[str, Any]) -> NotificationTemplate | None:
        """Apply ``values`` (column name to value) to a non-deleted template."""

        model = self._active_query().filter(NotificationTemplateModel.id == template_id).first()
        if model is None:
            return None
        for name, value in values.items():
            if name == "types":
                value = encode_tags(value)
            setattr(model, name, value)
        commit(self.session, action="update notification template")
        self.session.refresh(model)
        return self._to_entity(model)

    def soft_delete(self, template_id: str, *, deleted_at: datetime) -> NotificationTemplate | None:
        model = self._active_query().filter(NotificationTemplateModel.id == template_id).first()
        if model is None:
            return None
        model.deleted_at = deleted_at
        model.updated_at = deleted_at
        commit(self.session, action="delete notification template")
        self.session.refresh(model)
        return self._to_entity(model)

    def _active_query(self):
        return self.session.query(NotificationTemplateModel).filter(
            NotificationTemplateModel.deleted_at.is_(None)
        )

    @staticmethod
    def _to_entity(model: NotificationTemplateModel) -> NotificationTemplate:
        return NotificationTemplate(
            id=model.id,
            title=model.title,
            message=model.message,
            types=decode_tags(model.types),
            channel=model.channel,
            comment=model.comment,
            customer_id=model.customer_id,
            customer_name=model.customer.name if model.customer is not None else None,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            deleted_at=ensure_utc(model.deleted_at),
        )


__all__ = ["TemplateRepository"]
