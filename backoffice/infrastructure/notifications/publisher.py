"""Publish realtime events to websocket channel subscribers."""

from __future__ import annotations

import asyncio
import copy
import logging
from datetime import datetime
from typing import Any

from anyio import from_thread

from backoffice.domain.entities import Notification

from .manager import ChannelConnectionManager, channel_manager

logger = logging.getLogger(__name__)


class RealtimePublisher:
    """Best-effort, fire-and-forget ``publish(channel, event, payload)``.

    Calls made on the event loop schedule a task and return at once. Calls made
    from AnyIO worker threads, such as FastAPI background tasks and sync
    endpoints, hand the broadcast to the loop through ``anyio.from_thread``.
    Calls made anywhere else are dropped with a warning.
    """

    def __init__(self, manager: ChannelConnectionManager) -> None:
        self._manager = manager
        self._tasks: set[asyncio.Task] = set()

    def publish(self, channel: str, event: str, payload: Any) -> None:
        message = {"channel": channel, "event": event, "payload": copy.deepcopy(payload)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self._manager.broadcast(channel, message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        try:
            from_thread.run(self._manager.broadcast, channel, message)
        except RuntimeError:
            logger.warning(
                "Not running on an AnyIO worker thread; dropping '%s' event for %s",
                event,
                channel,
            )


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "customer_id": notification.customer_id,
        "sender_id": notification.sender_id,
        "template_id": notification.template_id,
        "type": sorted(notification.types),
        "title": notification.title,
        "message": notification.message,
        "channel": notification.channel,
        "metadata": notification.metadata,
        "generated_by": notification.generated_by,
        "is_read": notification.is_read,
        "created_at": _iso_or_none(notification.created_at),
        "read_at": _iso_or_none(notification.read_at),
    }


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


realtime_publisher = RealtimePublisher(channel_manager)


__all__ = ["RealtimePublisher", "realtime_publisher", "serialize_notification"]
