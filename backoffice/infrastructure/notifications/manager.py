"""Connection management helpers for realtime websocket channels."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ChannelConnectionManager:
    """Manage active websocket connections grouped by channel name.

    Channels are plain strings such as ``unread-notifications:<user id>``;
    a socket may be subscribed to any number of them.
    """

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, *channels: str) -> None:
        """Accept the websocket connection and subscribe it to ``channels``."""

        await websocket.accept()
        for channel in channels:
            self.subscribe(channel, websocket)

    def subscribe(self, channel: str, websocket: WebSocket) -> None:
        self._subscribers[channel].add(websocket)

    def unsubscribe(self, channel: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``channel``."""

        subscribers = self._subscribers.get(channel)
        if subscribers is None:
            return
        subscribers.discard(websocket)
        if not subscribers:
            self._subscribers.pop(channel, None)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from every channel it is subscribed to."""

        for channel in list(self._subscribers):
            self.unsubscribe(channel, websocket)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    async def broadcast(self, channel: str, message: dict[str, Any]) -> None:
        """Send ``message`` to every connection subscribed to ``channel``."""

        for connection in list(self._subscribers.get(channel, set())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.info("Dropping websocket that failed to receive on %s", channel)
                self.disconnect(connection)


channel_manager = ChannelConnectionManager()


__all__ = ["ChannelConnectionManager", "channel_manager"]
