"""Tests for websocket channel management and realtime publishing."""

from __future__ import annotations

import asyncio
import logging

import anyio
from anyio import to_thread

from backoffice.infrastructure.notifications import (
    ChannelConnectionManager,
    RealtimePublisher,
)


class FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.accepted = False
        self.broken = broken
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message) -> None:
        if self.broken:
            raise RuntimeError("connection closed")
        self.sent.append(message)


async def _wait_for(predicate, attempts: int = 100) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.01)


def test_broadcast_reaches_only_channel_subscribers():
    async def scenario():
        manager = ChannelConnectionManager()
        alice, bob = FakeWebSocket(), FakeWebSocket()
        await manager.connect(alice, "main-notifications:a", "unread-notifications:a")
        await manager.connect(bob, "main-notifications:b")

        await manager.broadcast("main-notifications:a", {"event": "new"})
        return manager, alice, bob

    manager, alice, bob = asyncio.run(scenario())

    assert alice.accepted and bob.accepted
    assert alice.sent == [{"event": "new"}]
    assert bob.sent == []
    assert manager.subscriber_count("unread-notifications:a") == 1


def test_disconnect_and_broken_sockets_are_removed():
    async def scenario():
        manager = ChannelConnectionManager()
        healthy, broken = FakeWebSocket(), FakeWebSocket(broken=True)
        await manager.connect(healthy, "room", "other")
        await manager.connect(broken, "room")

        await manager.broadcast("room", {"n": 1})
        manager.disconnect(healthy)
        return manager, healthy

    manager, healthy = asyncio.run(scenario())

    assert healthy.sent == [{"n": 1}]
    assert manager.subscriber_count("room") == 0
    assert manager.subscriber_count("other") == 0


def test_publish_on_the_event_loop_schedules_the_broadcast():
    async def scenario():
        manager = ChannelConnectionManager()
        socket = FakeWebSocket()
        await manager.connect(socket, "unread-notifications:u1")
        payload = {"count": 3}

        publisher = RealtimePublisher(manager)
        publisher.publish("unread-notifications:u1", "unread_count", payload)
        payload["count"] = 99
        pending = len(publisher._tasks)
        await _wait_for(lambda: socket.sent and not publisher._tasks)
        return socket, pending, len(publisher._tasks)

    socket, pending, remaining = asyncio.run(scenario())

    assert (pending, remaining) == (1, 0)

    assert socket.sent == [
        {"channel": "unread-notifications:u1", "event": "unread_count", "payload": {"count": 3}}
    ]


def test_publish_from_a_worker_thread_reaches_the_event_loop():
    async def scenario():
        manager = ChannelConnectionManager()
        socket = FakeWebSocket()
        await manager.connect(socket, "main-notifications:u1")
        publisher = RealtimePublisher(manager)

        await to_thread.run_sync(
            publisher.publish, "main-notifications:u1", "new", {"id": "n1"}
        )
        return socket

    socket = anyio.run(scenario)

    assert socket.sent[0]["payload"] == {"id": "n1"}


def test_publish_outside_the_event_loop_and_its_workers_is_dropped(caplog):
    publisher = RealtimePublisher(ChannelConnectionManager())

    with caplog.at_level(logging.WARNING):
        publisher.publish("main-notifications:u1", "new", {})

    assert "dropping" in caplog.text
