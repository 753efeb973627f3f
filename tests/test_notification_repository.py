"""Tests for the notification repository's batched writes."""

from __future__ import annotations

from sqlalchemy import event

from backoffice.domain.constants import NotificationType
from backoffice.domain.entities import Notification
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.utils import utcnow


def _pending(user, title: str) -> Notification:
    return Notification(
        id=None,
        user_id=user.id,
        title=title,
        message="<p>Maintenance tonight</p>",
        types=frozenset({NotificationType.IN_APP.value}),
        customer_id=user.customer_id,
        created_at=utcnow(),
    )


def test_create_many_uses_one_insert_and_one_select(engine, session, seed):
    customer = seed.customer()
    users = [seed.user(customer) for _ in range(50)]
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement.lstrip().split(None, 1)[0].upper())

    event.listen(engine, "before_cursor_execute", record)
    try:
        created = NotificationRepository(session).create_many(
            [_pending(user, f"Notice {index}") for index, user in enumerate(users)]
        )
    finally:
        event.remove(engine, "before_cursor_execute", record)

    assert statements.count("INSERT") == 1
    assert statements.count("SELECT") == 1
    assert [item.title for item in created] == [f"Notice {index}" for index in range(50)]
    assert [item.user_id for item in created] == [user.id for user in users]
    assert all(item.id and item.customer_name == customer.name for item in created)
