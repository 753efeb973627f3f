"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from backoffice.domain.entities import Notification, Page
from backoffice.domain.tags import decode_tags, encode_tags, tag_pattern
from backoffice.infrastructure.models import NotificationModel, new_id
from backoffice.utils import ensure_utc

from ._session import commit


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Every read and write that acts on behalf of a recipient filters on
    ``user_id`` so one user can never observe or mutate another user's rows.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        commit(self.session, action="create notification")
        self.session.refresh(model)
        return self._to_entity(model)

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        """Insert ``notifications`` in a single transaction.

        The stored rows are read back with one query and returned in input order.
        """

        models = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            model.id = model.id or new_id()
            models.append(model)
        ids = [model.id for model in models]
        self.session.add_all(models)
        commit(self.session, action="create notifications")
        stored = {
            model.id: model
            for model in self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .all()
        }
        return [self._to_entity(stored[notification_id]) for notification_id in ids]

    def get_for_user(self, notification_id: str, *, user_id: str) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: str,
        *,
        page: int,
        per_page: int,
        type_tag: str | None = None,
        is_read: bool | None = None,
        channel: str | None = None,
    ) -> Page[Notification]:
        conditions = [NotificationModel.user_id == user_id]
        if type_tag:
            conditions.append(NotificationModel.types.like(tag_pattern(type_tag)))
        conditions.extend(self._read_state_conditions(is_read))
        if channel:
            conditions.append(NotificationModel.channel == channel)
        return self._paginate(conditions, page=page, per_page=per_page)

    def list_all(
        self,
        *,
        page: int,
        per_page: int,
        user_ids: Sequence[str] | None = None,
        customer_ids: Sequence[str] | None = None,
        sender_ids: Sequence[str] | None = None,
        type_tags: Iterable[str] | None = None,
        is_read: bool | None = None,
        channels: Sequence[str] | None = None,
        search: str | None = None,
    ) -> Page[Notification]:
        conditions = []
        if user_ids:
            conditions.append(NotificationModel.user_id.in_(tuple(user_ids)))
        if customer_ids:
            conditions.append(NotificationModel.customer_id.in_(tuple(customer_ids)))
        if sender_ids:
            conditions.append(NotificationModel.sender_id.in_(tuple(sender_ids)))
        for tag in type_tags or ():
            conditions.append(NotificationModel.types.like(tag_pattern(tag)))
        conditions.extend(self._read_state_conditions(is_read))
        if channels:
            conditions.append(NotificationModel.channel.in_(tuple(channels)))
        if search:
            term = f"%{_escape_like(search.strip())}%"
            conditions.append(
                or_(
                    NotificationModel.title.ilike(term, escape="\\"),
                    NotificationModel.message.ilike(term, escape="\\"),
                    NotificationModel.generated_by.ilike(term, escape="\\"),
                )
            )
        return self._paginate(conditions, page=page, per_page=per_page)

    def mark_read(self, notification_id: str, *, user_id: str, read_at: datetime) -> int:
        """Stamp ``read_at`` on one notification owned by ``user_id``.

        The row is matched on id and recipient only, so re-marking an already
        read notification overwrites the timestamp but never clears it.
        """

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.user_id == user_id)
            .update({NotificationModel.read_at: read_at}, synchronize_session=False)
        )
        commit(self.session, action="mark notification as read")
        return updated

    def mark_unread_as_read(
        self,
        *,
        user_id: str,
        read_at: datetime,
        notification_ids: Iterable[str] | None = None,
    ) -> int:
        """Stamp every unread notification of ``user_id`` in one statement.

        When ``notification_ids`` is given the update is restricted to those
        ids; ids of other users or already read rows are simply not matched.
        """

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read_at.is_(None))
        )
        if notification_ids is not None:
            ids = tuple(notification_id for notification_id in notification_ids if notification_id)
            if not ids:
                return 0
            query = query.filter(NotificationModel.id.in_(ids))
        updated = query.update({NotificationModel.read_at: read_at}, synchronize_session=False)
        commit(self.session, action="mark notifications as read")
        return updated

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read_at.is_(None))
            .scalar()
            or 0
        )

    def _paginate(self, conditions: list, *, page: int, per_page: int) -> Page[Notification]:
        criteria = and_(*conditions) if conditions else None
        count_query = self.session.query(func.count(NotificationModel.id))
        list_query = self.session.query(NotificationModel)
        if criteria is not None:
            count_query = count_query.filter(criteria)
            list_query = list_query.filter(criteria)

        result: Page[Notification] = Page(
            total=count_query.scalar() or 0, page=page, per_page=per_page
        )
        models = (
            list_query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(result.offset)
            .limit(per_page)
            .all()
        )
        result.items = [self._to_entity(model) for model in models]
        return result

    @staticmethod
    def _read_state_conditions(is_read: bool | None) -> list:
        if is_read is None:
            return []
        if is_read:
            return [NotificationModel.read_at.is_not(None)]
        return [NotificationModel.read_at.is_(None)]

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        if notification.id:
            model.id = notification.id
        model.user_id = notification.user_id
        model.customer_id = notification.customer_id
        model.sender_id = notification.sender_id
        model.template_id = notification.template_id
        model.types = encode_tags(notification.types)
        model.title = notification.title
        model.message = notification.message
        model.channel = notification.channel
        model.metadata_ = notification.metadata
        model.generated_by = notification.generated_by
        model.read_at = notification.read_at
        if notification.created_at is not None:
            model.created_at = notification.created_at

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title or "",
            message=model.message,
            types=decode_tags(model.types),
            channel=model.channel,
            customer_id=model.customer_id,
            sender_id=model.sender_id,
            template_id=model.template_id,
            metadata=model.metadata_,
            generated_by=model.generated_by,
            created_at=ensure_utc(model.created_at),
            read_at=ensure_utc(model.read_at),
            user_email=model.user.email if model.user is not None else None,
            user_full_name=model.user.full_name if model.user is not None else None,
            customer_name=model.customer.name if model.customer is not None else None,
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


__all__ = ["NotificationRepository"]
