"""
Bladewatch Notifications Module
===============================

Fans repair plan events out to observers connected over WebSocket or
over the Server-Sent Events fallback.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.notifications.channels import (
    ChannelKind,
    NotificationEvent,
    NotificationChannel,
    WebSocketChannel,
    EventStreamChannel,
    encode_sse,
)
from bladewatch.notifications.broadcaster import Broadcaster, BroadcastReport

__all__ = [
    "ChannelKind",
    "NotificationEvent",
    "NotificationChannel",
    "WebSocketChannel",
    "EventStreamChannel",
    "encode_sse",
    "Broadcaster",
    "BroadcastReport",
]
