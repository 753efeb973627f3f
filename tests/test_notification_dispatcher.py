"""Tests for notification creation, fan-out and background delivery."""

from __future__ import annotations

import logging

import pytest

from backoffice.application.use_cases.notifications import dispatcher as dispatcher_module
from backoffice.application.use_cases.notifications import (
    NotificationDispatcher,
    NotificationRequest,
)
from backoffice.domain.constants import main_notifications_channel, unread_notifications_channel
from backoffice.domain.exceptions import ConflictError, ValidationError
from backoffice.infrastructure.models import NotificationModel
from backoffice.infrastructure.repositories import NotificationRepository

from conftest import ExplodingPublisher, InlineTasks


@pytest.fixture()
def dispatcher(session, session_factory, publisher, tasks):
    return NotificationDispatcher(
        session, publisher=publisher, schedule=tasks.add_task, session_factory=session_factory
    )


def _rows(session):
    session.expire_all()
    return session.query(NotificationModel).all()


def test_fan_out_creates_one_unread_row_per_active_user(session, seed, dispatcher):
    """Every non-deleted user of the customer receives exactly one notification."""

    customer = seed.customer()
    users = [seed.user(customer) for _ in range(3)]
    seed.user(customer, deleted=True)
    seed.user(seed.customer("Other"))

    last = dispatcher.create(
        NotificationRequest(title="Release", message="<p>New release</p>", customer_id=customer.id)
    )

    rows = _rows(session)
    assert sorted(row.user_id for row in rows) == sorted(user.id for user in users)
    assert all(row.read_at is None for row in rows)
    assert all(row.customer_id == customer.id for row in rows)
    assert last.user_id in {user.id for user in users}
    assert last.is_read is False


def test_fan_out_pushes_unread_count_and_new_event_to_every_recipient(
    seed, dispatcher, publisher
):
    customer = seed.customer()
    users = [seed.user(customer) for _ in range(2)]
    seed.notification(users[0])

    dispatcher.create(NotificationRequest(title="Hi", message="hi", customer_id=customer.id))

    assert publisher.payloads(unread_notifications_channel(users[0].id), "unread_count") == [
        {"count": 2}
    ]
    assert publisher.payloads(unread_notifications_channel(users[1].id), "unread_count") == [
        {"count": 1}
    ]
    for user in users:
        (payload,) = publisher.payloads(main_notifications_channel(user.id), "new")
        assert payload["title"] == "Hi"
        assert payload["is_read"] is False
        assert payload["type"] == ["in_app"]


def test_fan_out_to_customer_without_users_is_rejected(session, seed, dispatcher, tasks):
    customer = seed.customer()
    seed.user(customer, deleted=True)

    with pytest.raises(ConflictError):
        dispatcher.create(NotificationRequest(title="t", message="m", customer_id=customer.id))

    assert _rows(session) == []
    assert tasks.scheduled == 0


def test_request_without_user_or_customer_is_rejected(session, dispatcher):
    with pytest.raises(ConflictError):
        dispatcher.create(NotificationRequest(title="t", message="m"))

    assert _rows(session) == []


def test_user_takes_precedence_over_customer(session, seed, dispatcher):
    """With both ids only the user is notified; the customer is kept on the row."""

    customer = seed.customer()
    target = seed.user(customer)
    seed.user(customer)

    created = dispatcher.create(
        NotificationRequest(title="t", message="m", user_id=target.id, customer_id=customer.id)
    )

    rows = _rows(session)
    assert len(rows) == 1
    assert created.user_id == target.id
    assert created.customer_id == customer.id


def test_message_is_sanitized_before_persistence_and_push(session, seed, dispatcher, publisher):
    customer = seed.customer()
    user = seed.user(customer)

    created = dispatcher.create(
        NotificationRequest(
            title="t",
            message="<script>evil()</script>hello",
            user_id=user.id,
            customer_id=customer.id,
        )
    )

    (row,) = _rows(session)
    assert "<script" not in row.message
    assert "evil()" not in row.message
    assert created.message == row.message == "hello"
    (payload,) = publisher.payloads(main_notifications_channel(user.id), "new")
    assert payload["message"] == row.message


def test_email_only_notification_is_not_pushed_in_app(seed, dispatcher, publisher):
    customer = seed.customer()
    user = seed.user(customer)

    dispatcher.create(
        NotificationRequest(
            title="t", message="m", types="email", user_id=user.id, customer_id=customer.id
        )
    )

    assert publisher.payloads(main_notifications_channel(user.id)) == []
    assert publisher.payloads(unread_notifications_channel(user.id)) == [{"count": 1}]


def test_send_in_app_requires_user_customer_and_in_app_tag(seed, dispatcher, publisher):
    customer = seed.customer()
    user = seed.user(customer)
    in_app = seed.notification(user)
    without_customer = seed.notification(seed.user())
    email_only = seed.notification(user, types=("email",))

    assert dispatcher.send_in_app(in_app) is True
    assert dispatcher.send_in_app(without_customer) is False
    assert dispatcher.send_in_app(email_only) is False
    assert len(publisher.events) == 1


def test_realtime_push_happens_after_create_returns(
    session, session_factory, seed, publisher
):
    tasks = InlineTasks(defer=True)
    dispatcher = NotificationDispatcher(
        session, publisher=publisher, schedule=tasks.add_task, session_factory=session_factory
    )
    customer = seed.customer()
    user = seed.user(customer)

    dispatcher.create(
        NotificationRequest(title="t", message="m", user_id=user.id, customer_id=customer.id)
    )

    assert publisher.events == []
    assert NotificationRepository(session).count_unread(user.id) == 1

    tasks.run_pending()

    assert publisher.payloads(unread_notifications_channel(user.id)) == [{"count": 1}]


def test_realtime_failures_never_fail_create(session, session_factory, seed, tasks):
    dispatcher = NotificationDispatcher(
        session,
        publisher=ExplodingPublisher(),
        schedule=tasks.add_task,
        session_factory=session_factory,
    )
    customer = seed.customer()
    users = [seed.user(customer) for _ in range(2)]

    created = dispatcher.create(
        NotificationRequest(title="t", message="m", customer_id=customer.id)
    )

    assert created.id is not None
    assert len(_rows(session)) == len(users)


def test_background_delivery_errors_are_logged_not_raised(session, seed, publisher, caplog):
    def broken_factory():
        raise RuntimeError("database unavailable")

    tasks = InlineTasks(defer=True)
    dispatcher = NotificationDispatcher(
        session, publisher=publisher, schedule=tasks.add_task, session_factory=broken_factory
    )
    customer = seed.customer()
    user = seed.user(customer)
    dispatcher.create(
        NotificationRequest(title="t", message="m", user_id=user.id, customer_id=customer.id)
    )

    with caplog.at_level(logging.ERROR):
        tasks.run_pending()

    assert "Post-commit delivery failed" in caplog.text
    assert "database unavailable" in caplog.text
    assert publisher.events == []


def test_background_delivery_waits_for_the_configured_delay(
    session, session_factory, seed, publisher, monkeypatch
):
    slept = []
    monkeypatch.setattr(dispatcher_module.time, "sleep", slept.append)
    dispatcher = NotificationDispatcher(
        session,
        publisher=publisher,
        schedule=InlineTasks().add_task,
        session_factory=session_factory,
        delay=0.25,
    )
    customer = seed.customer()
    user = seed.user(customer)

    dispatcher.create(
        NotificationRequest(title="t", message="m", user_id=user.id, customer_id=customer.id)
    )

    assert slept == [0.25]
    assert publisher.payloads(unread_notifications_channel(user.id)) == [{"count": 1}]


def test_unknown_notification_type_is_rejected(session, seed, dispatcher):
    user = seed.user(seed.customer())

    with pytest.raises(ValidationError):
        dispatcher.create(
            NotificationRequest(title="t", message="m", types=["sms"], user_id=user.id)
        )

    assert _rows(session) == []


def test_multiple_type_tags_are_stored_as_a_set(seed, dispatcher):
    customer = seed.customer()
    user = seed.user(customer)

    created = dispatcher.create(
        NotificationRequest(
            title="t",
            message="m",
            types=["in_app", "email", "in_app"],
            user_id=user.id,
            customer_id=customer.id,
        )
    )

    assert created.types == frozenset({"in_app", "email"})
