"""Realtime notification helpers for the infrastructure layer."""

from .manager import ChannelConnectionManager, channel_manager
from .publisher import RealtimePublisher, realtime_publisher, serialize_notification

__all__ = [
    "ChannelConnectionManager",
    "channel_manager",
    "RealtimePublisher",
    "realtime_publisher",
    "serialize_notification",
]
