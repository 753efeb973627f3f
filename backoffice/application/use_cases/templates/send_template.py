"""Send notifications built from a stored template."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from backoffice.application.use_cases.notifications import (
    NotificationDispatcher,
    NotificationRequest,
)
from backoffice.domain.constants import NotificationType
from backoffice.domain.entities import NotificationTemplate
from backoffice.domain.exceptions import (
    ForbiddenError,
    NotFoundError,
    NotificationBatchError,
    ValidationError,
)
from backoffice.infrastructure.repositories import UserRepository

from .get_template import get_template

logger = logging.getLogger(__name__)

TEMPLATE_GENERATED_BY = "user (notification templates api)"


class TemplateSender:
    """Resolve a template and its audience into dispatcher calls."""

    def __init__(self, session: Session, *, dispatcher: NotificationDispatcher) -> None:
        self._session = session
        self._dispatcher = dispatcher

    def send_using_template(
        self,
        template_id: str,
        *,
        user_ids: Iterable[str] | None = None,
        customer_id: str | None = None,
        requester_customer_id: str | None = None,
        sender_id: str | None = None,
    ) -> NotificationTemplate:
        """Send ``template_id`` to a whole customer or to explicit users.

        A ``customer_id`` produces a single fan-out create. Otherwise every
        distinct user id gets its own create; failing users are collected
        into :class:`NotificationBatchError` while the others are kept. The
        per-user creates run one after another because they share the request's
        ``Session``, which is not thread-safe; their realtime delivery is still
        deferred to the background like any other create.
        """

        template = get_template(self._session, template_id, customer_id=requester_customer_id)
        if NotificationType.EMAIL.value in template.types:
            raise ForbiddenError(
                "Email notification templates cannot be sent in-app",
                details={"id": template.id},
            )

        if customer_id:
            self._dispatcher.create(
                self._request(template, customer_id=customer_id, sender_id=sender_id)
            )
            logger.info("Sent template %s to customer %s", template.id, customer_id)
            return template

        targets = list(dict.fromkeys(user_id for user_id in user_ids or () if user_id))
        if not targets:
            raise ValidationError("No target users specified for notification")

        users = UserRepository(self._session).get_map_by_ids(targets)
        failures: dict[str, Exception] = {}
        for user_id in targets:
            user = users.get(user_id)
            try:
                if user is None:
                    raise NotFoundError("User not found", details={"id": user_id})
                self._dispatcher.create(
                    self._request(
                        template,
                        user_id=user_id,
                        customer_id=template.customer_id or user.customer_id,
                        sender_id=sender_id,
                    )
                )
            except Exception as exc:
                logger.warning(
                    "Template %s could not be sent to user %s: %s", template.id, user_id, exc
                )
                failures[user_id] = exc

        if failures:
            raise NotificationBatchError(failures, succeeded=len(targets) - len(failures))
        logger.info("Sent template %s to %s user(s)", template.id, len(targets))
        return template

    @staticmethod
    def _request(
        template: NotificationTemplate,
        *,
        user_id: str | None = None,
        customer_id: str | None = None,
        sender_id: str | None = None,
    ) -> NotificationRequest:
        return NotificationRequest(
            title=template.title,
            message=template.message,
            types=NotificationType.IN_APP.value,
            channel=template.channel,
            user_id=user_id,
            customer_id=customer_id,
            sender_id=sender_id,
            template_id=template.id,
            generated_by=TEMPLATE_GENERATED_BY,
        )


def send_template(
    session: Session,
    template_id: str,
    *,
    dispatcher: NotificationDispatcher,
    user_ids: Iterable[str] | None = None,
    customer_id: str | None = None,
    requester_customer_id: str | None = None,
    sender_id: str | None = None,
) -> str:
    """Send the template and return the acknowledgement shown to the caller."""

    template = TemplateSender(session, dispatcher=dispatcher).send_using_template(
        template_id,
        user_ids=user_ids,
        customer_id=customer_id,
        requester_customer_id=requester_customer_id,
        sender_id=sender_id,
    )
    return f'Notification template "{template.title}" sent successfully'


__all__ = ["TEMPLATE_GENERATED_BY", "TemplateSender", "send_template"]
