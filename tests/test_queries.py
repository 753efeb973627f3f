"""Tests for the notification listing helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from backoffice.application.use_cases.notifications import (
    AdminNotificationFilters,
    NotificationFilters,
    clamp_page,
    get_notification,
    list_admin_notifications,
    list_notifications,
)
from backoffice.domain.exceptions import NotFoundError
from backoffice.utils import utcnow


def test_list_notifications_is_paginated_newest_first(session, seed):
    user = seed.user()
    now = utcnow()
    created = [
        seed.notification(user, title=f"n{index}", created_at=now - timedelta(minutes=index))
        for index in range(5)
    ]

    first = list_notifications(session, user.id, NotificationFilters(page=1, per_page=2))
    last = list_notifications(session, user.id, NotificationFilters(page=3, per_page=2))

    assert [item.id for item in first.items] == [created[0].id, created[1].id]
    assert (first.total, first.last_page, first.prev, first.next) == (5, 3, None, 2)
    assert [item.id for item in last.items] == [created[4].id]
    assert (last.prev, last.next) == (2, None)


def test_list_notifications_filters(session, seed):
    user = seed.user()
    seed.notification(user, types=("email",), channel="alert")
    seed.notification(user, types=("in_app", "email"), read=True)
    seed.notification(user, types=("in_app",), channel="article")

    by_type = list_notifications(session, user.id, NotificationFilters(type="email"))
    unread = list_notifications(session, user.id, NotificationFilters(is_read=False))
    by_channel = list_notifications(session, user.id, NotificationFilters(channel="article"))

    assert by_type.total == 2
    assert unread.total == 2
    assert all(item.read_at is None for item in unread.items)
    assert [item.channel for item in by_channel.items] == ["article"]


def test_get_notification_is_scoped_to_recipient(session, seed):
    customer = seed.customer()
    owner = seed.user(customer)
    notification = seed.notification(owner)

    assert get_notification(session, owner.id, notification.id).id == notification.id
    with pytest.raises(NotFoundError):
        get_notification(session, seed.user(customer).id, notification.id)


def test_admin_listing_filters_by_customer_and_search(session, seed):
    acme, globex = seed.customer("Acme"), seed.customer("Globex")
    alice, bob = seed.user(acme), seed.user(globex)
    seed.notification(alice, title="Quarterly report", generated_by="user (notifications api)")
    seed.notification(alice, title="Welcome")
    seed.notification(bob, title="Quarterly report")

    scoped = list_admin_notifications(
        session, AdminNotificationFilters(customer_ids=[acme.id], search="QUARTERLY")
    )
    everything = list_admin_notifications(session)
    generated = list_admin_notifications(
        session, AdminNotificationFilters(search="notifications api")
    )

    assert scoped.total == 1
    assert scoped.items[0].user_id == alice.id
    assert scoped.items[0].customer_name == "Acme"
    assert everything.total == 3
    assert generated.total == 1


def test_admin_search_treats_like_wildcards_literally(session, seed):
    user = seed.user(seed.customer())
    seed.notification(user, title="Storage at 100% capacity")
    seed.notification(user, title="Storage at 1000 GB")
    seed.notification(user, title="in_app rollout")
    seed.notification(user, title="inXapp rollout")

    percent = list_admin_notifications(session, AdminNotificationFilters(search="100%"))
    underscore = list_admin_notifications(session, AdminNotificationFilters(search="in_app"))

    assert [item.title for item in percent.items] == ["Storage at 100% capacity"]
    assert [item.title for item in underscore.items] == ["in_app rollout"]


def test_admin_listing_type_filter_requires_every_tag(session, seed):
    user = seed.user()
    seed.notification(user, types=("email",))
    both = seed.notification(user, types=("email", "in_app"))

    result = list_admin_notifications(
        session, AdminNotificationFilters(types=["email", "in_app"])
    )

    assert [item.id for item in result.items] == [both.id]


def test_clamp_page_applies_configured_bounds():
    assert clamp_page(None, None) == (1, 10)
    assert clamp_page(0, 1000) == (1, 100)
    assert clamp_page(3, 25) == (3, 25)
