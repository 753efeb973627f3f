"""Creation and delivery of notifications."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from backoffice.domain.constants import (
    NEW_NOTIFICATION_EVENT,
    NotificationType,
    main_notifications_channel,
)
from backoffice.domain.entities import Notification
from backoffice.domain.exceptions import ConflictError
from backoffice.domain.tags import normalize_tags
from backoffice.infrastructure.notifications import (
    RealtimePublisher,
    serialize_notification,
)
from backoffice.infrastructure.repositories import NotificationRepository, UserRepository
from backoffice.utils import HtmlSanitizer, utcnow

from .read_state import ReadStateTracker

logger = logging.getLogger(__name__)


@dataclass
class NotificationRequest:
    """Input of :meth:`NotificationDispatcher.create`.

    ``types`` accepts a single tag or any iterable of tags.
    """

    title: str
    message: str
    types: Any = NotificationType.IN_APP.value
    channel: str | None = None
    user_id: str | None = None
    customer_id: str | None = None
    sender_id: str | None = None
    template_id: str | None = None
    metadata: dict[str, Any] | None = field(default=None)
    generated_by: str | None = None


class NotificationDispatcher:
    """Persist notifications and hand their realtime delivery to the background.

    Rows are written in the caller's transaction. Pushing unread counts and
    ``new`` events is handed to ``schedule`` (FastAPI's
    ``BackgroundTasks.add_task`` in the API) and runs after the response on a
    session of its own, so a slow or broken realtime channel never fails a
    create.
    """

    def __init__(
        self,
        session: Session,
        *,
        publisher: RealtimePublisher,
        schedule: Callable[..., Any],
        session_factory: Callable[[], Session],
        sanitizer: HtmlSanitizer | None = None,
        delay: float = 0.0,
    ) -> None:
        self._session = session
        self._publisher = publisher
        self._schedule = schedule
        self._session_factory = session_factory
        self._sanitizer = sanitizer or HtmlSanitizer()
        self._delay = delay
        self._notifications = NotificationRepository(session)

    def create(self, request: NotificationRequest) -> Notification:
        """Create one notification per resolved recipient.

        A request with only ``customer_id`` fans out to every non-deleted user
        of that customer in a single insert; a request with ``user_id`` targets
        that user alone. Returns the created row, or the last row of a fan-out.
        """

        types = normalize_tags(request.types)
        recipients = self._resolve_recipients(request)
        message = self._sanitizer.sanitize(request.message)
        created_at = utcnow()

        rows = [
            Notification(
                id=None,
                user_id=user_id,
                title=request.title,
                message=message,
                types=types,
                channel=request.channel,
                customer_id=request.customer_id,
                sender_id=request.sender_id,
                template_id=request.template_id,
                metadata=request.metadata,
                generated_by=request.generated_by,
                created_at=created_at,
            )
            for user_id in recipients
        ]
        if request.user_id:
            created = [self._notifications.create(rows[0])]
        else:
            created = self._notifications.create_many(rows)
            logger.info(
                "Fanned out notification to %s user(s) of customer %s",
                len(created),
                request.customer_id,
            )

        logger.info("Created %s notification(s) titled %r", len(created), request.title)
        self._schedule(self._run_post_commit, created)
        return created[-1]

    def send_in_app(self, notification: Notification) -> bool:
        """Publish ``notification`` on its recipient's main channel.

        Only in-app notifications attached to both a user and a customer are
        published. Returns whether anything was published.
        """

        if not notification.user_id or not notification.customer_id:
            return False
        if NotificationType.IN_APP.value not in notification.types:
            return False
        self._publisher.publish(
            main_notifications_channel(notification.user_id),
            NEW_NOTIFICATION_EVENT,
            serialize_notification(notification),
        )
        return True

    def _resolve_recipients(self, request: NotificationRequest) -> list[str]:
        if not request.user_id and request.customer_id:
            user_ids = UserRepository(self._session).list_ids_by_customer(request.customer_id)
            if not user_ids:
                raise ConflictError(
                    "No users found for the customer",
                    details={"customer_id": request.customer_id},
                )
            return user_ids
        if request.user_id:
            return [request.user_id]
        raise ConflictError("Notification must be associated with a user or customer")

    def _run_post_commit(self, notifications: list[Notification]) -> None:
        if self._delay:
            time.sleep(self._delay)
        try:
            self._notify_recipients(notifications)
        except Exception:
            logger.exception(
                "Post-commit delivery failed for %s notification(s)", len(notifications)
            )

    def _notify_recipients(self, notifications: list[Notification]) -> None:
        session = self._session_factory()
        try:
            tracker = ReadStateTracker(session, publisher=self._publisher)
            for user_id in dict.fromkeys(item.user_id for item in notifications):
                try:
                    tracker.push_unread_count(user_id)
                except Exception:
                    logger.exception("Failed to refresh unread count for user %s", user_id)
        finally:
            session.close()

        for notification in notifications:
            try:
                self.send_in_app(notification)
            except Exception:
                logger.exception("Failed to publish notification %s", notification.id)


__all__ = ["NotificationDispatcher", "NotificationRequest"]
