"""Tests for read/unread tracking of notifications."""

from __future__ import annotations

import pytest

from backoffice.application.use_cases.notifications import ReadStateTracker, list_notifications
from backoffice.domain.constants import unread_notifications_channel
from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.models import NotificationModel

from conftest import ExplodingPublisher


@pytest.fixture()
def tracker(session, publisher):
    return ReadStateTracker(session, publisher=publisher)


def _read_at(session, notification_id):
    session.expire_all()
    return session.get(NotificationModel, notification_id).read_at


def test_unread_count_and_mark_one_publish_new_count(seed, tracker, publisher):
    user = seed.user(seed.customer())
    unread = [seed.notification(user) for _ in range(5)]
    for _ in range(2):
        seed.notification(user, read=True)

    assert tracker.unread_count(user.id) == 5

    marked = tracker.mark_one(user.id, unread[0].id)

    assert marked.is_read is True
    assert marked.read_at is not None
    assert tracker.unread_count(user.id) == 4
    assert publisher.events == [
        (unread_notifications_channel(user.id), "unread_count", {"count": 4})
    ]


def test_mark_one_does_not_touch_other_users_notifications(session, seed, tracker, publisher):
    customer = seed.customer()
    owner = seed.user(customer)
    intruder = seed.user(customer)
    notification = seed.notification(owner)

    with pytest.raises(NotFoundError):
        tracker.mark_one(intruder.id, notification.id)

    assert _read_at(session, notification.id) is None
    assert publisher.events == []


def test_mark_one_unknown_notification_raises(seed, tracker):
    user = seed.user()

    with pytest.raises(NotFoundError):
        tracker.mark_one(user.id, "missing")


def test_mark_one_on_read_notification_keeps_it_read(session, seed, tracker):
    user = seed.user()
    notification = seed.notification(user, read=True)

    tracker.mark_one(user.id, notification.id)

    assert _read_at(session, notification.id) is not None


def test_mark_all_is_idempotent(session, seed, tracker, publisher):
    user = seed.user()
    notifications = [seed.notification(user) for _ in range(3)]
    already_read = seed.notification(user, read=True)
    previous_read_at = _read_at(session, already_read.id)

    assert tracker.mark_all(user.id) == 3
    first_pass = {item.id: _read_at(session, item.id) for item in notifications}

    assert tracker.mark_all(user.id) == 0
    second_pass = {item.id: _read_at(session, item.id) for item in notifications}

    assert first_pass == second_pass
    assert all(value is not None for value in second_pass.values())
    assert _read_at(session, already_read.id) == previous_read_at
    assert publisher.payloads(unread_notifications_channel(user.id)) == [
        {"count": 0},
        {"count": 0},
    ]


def test_mark_many_only_updates_own_unread_notifications(session, seed, tracker, publisher):
    customer = seed.customer()
    user = seed.user(customer)
    other = seed.user(customer)
    mine = [seed.notification(user) for _ in range(3)]
    mine_read = seed.notification(user, read=True)
    theirs = seed.notification(other)
    previous_read_at = _read_at(session, mine_read.id)

    updated = tracker.mark_many(
        user.id, [mine[0].id, mine[1].id, mine[1].id, mine_read.id, theirs.id, "missing"]
    )

    assert updated == 2
    assert _read_at(session, mine[2].id) is None
    assert _read_at(session, theirs.id) is None
    assert _read_at(session, mine_read.id) == previous_read_at
    assert publisher.payloads(unread_notifications_channel(user.id)) == [{"count": 1}]


def test_mark_many_with_no_ids_changes_nothing(seed, tracker):
    user = seed.user()
    seed.notification(user)

    assert tracker.mark_many(user.id, []) == 0
    assert tracker.unread_count(user.id) == 1


def test_read_state_is_derived_from_read_at(session, seed):
    user = seed.user()
    seed.notification(user)
    seed.notification(user, read=True)

    page = list_notifications(session, user.id)

    assert page.total == 2
    for item in page.items:
        assert item.is_read is (item.read_at is not None)


def test_publish_failure_does_not_undo_mark(session, seed):
    user = seed.user()
    notification = seed.notification(user)
    tracker = ReadStateTracker(session, publisher=ExplodingPublisher())

    tracker.mark_one(user.id, notification.id)

    assert _read_at(session, notification.id) is not None
