"""Read/unread state of a user's notifications."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from backoffice.domain.constants import UNREAD_COUNT_EVENT, unread_notifications_channel
from backoffice.domain.entities import Notification
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.notifications import RealtimePublisher
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.utils import utcnow

logger = logging.getLogger(__name__)


class ReadStateTracker:
    """Mutate and query ``read_at`` for one recipient at a time.

    Every mutation that can change a user's unread count ends with
    :meth:`push_unread_count` so the badge shown to the user follows the
    ledger. ``read_at`` only ever moves from ``None`` to a timestamp.
    """

    def __init__(self, session: Session, *, publisher: RealtimePublisher) -> None:
        self._repository = NotificationRepository(session)
        self._publisher = publisher

    def mark_one(self, user_id: str, notification_id: str) -> Notification:
        updated = self._repository.mark_read(notification_id, user_id=user_id, read_at=utcnow())
        if not updated:
            raise NotFoundError("Notification not found", details={"id": notification_id})
        logger.info("Marked notification %s as read for user %s", notification_id, user_id)
        self.push_unread_count(user_id)
        notification = self._repository.get_for_user(notification_id, user_id=user_id)
        if notification is None:
            raise NotFoundError("Notification not found", details={"id": notification_id})
        return notification

    def mark_all(self, user_id: str) -> int:
        updated = self._repository.mark_unread_as_read(user_id=user_id, read_at=utcnow())
        logger.info("Marked %s notification(s) as read for user %s", updated, user_id)
        self.push_unread_count(user_id)
        return updated

    def mark_many(self, user_id: str, notification_ids: Iterable[str]) -> int:
        """Mark the unread notifications among ``notification_ids`` as read.

        Ids that belong to someone else or are already read are ignored.
        """

        updated = self._repository.mark_unread_as_read(
            user_id=user_id,
            read_at=utcnow(),
            notification_ids=list(dict.fromkeys(notification_ids)),
        )
        logger.info("Marked %s selected notification(s) as read for user %s", updated, user_id)
        self.push_unread_count(user_id)
        return updated

    def unread_count(self, user_id: str) -> int:
        return self._repository.count_unread(user_id)

    def push_unread_count(self, user_id: str) -> int:
        """Publish the current unread count of ``user_id`` and return it."""

        count = self.unread_count(user_id)
        try:
            self._publisher.publish(
                unread_notifications_channel(user_id), UNREAD_COUNT_EVENT, {"count": count}
            )
        except Exception:
            logger.exception("Failed to publish unread count for user %s", user_id)
        return count


__all__ = ["ReadStateTracker"]
