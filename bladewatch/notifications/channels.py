"""
Notification Channels
=====================

Transport adapters the Broadcaster writes events to.

    - WebSocketChannel: persistent bidirectional socket, JSON frames
    - EventStreamChannel: one-way SSE fallback, text/event-stream frames

Both carry the same logical event; only the framing differs.

Author: Bladewatch Team
Version: 1.0.0
"""

import asyncio
import json
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from bladewatch.exceptions import ChannelClosedError


class ChannelKind(str, Enum):
    """Transport kinds an observer can connect with."""
    WEBSOCKET = "websocket"
    EVENT_STREAM = "event_stream"


@dataclass(frozen=True)
class NotificationEvent:
    """A named event with a JSON-serializable body."""

    name: str
    data: Dict[str, Any] = field(default_factory=dict)


def encode_sse(event: NotificationEvent) -> str:
    """Frame an event for a text/event-stream response."""
    return f"event: {event.name}\ndata: {json.dumps(event.data, default=str)}\n\n"


class NotificationChannel(ABC):
    """One connected observer."""

    kind: ChannelKind

    def __init__(self, channel_id: Optional[str] = None):
        self.channel_id = channel_id or uuid.uuid4().hex[:12]

    @abstractmethod
    async def send(self, event: NotificationEvent) -> None:
        """Deliver an event. Raises if the observer can no longer receive."""

    @abstractmethod
    async def close(self) -> None:
        """Release the transport. Safe to call more than once."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.channel_id}>"


class WebSocketChannel(NotificationChannel):
    """Observer connected over a WebSocket."""

    kind = ChannelKind.WEBSOCKET

    def __init__(self, websocket: WebSocket, channel_id: Optional[str] = None):
        super().__init__(channel_id)
        self.websocket = websocket

    async def send(self, event: NotificationEvent) -> None:
        if self.websocket.client_state != WebSocketState.CONNECTED:
            raise ChannelClosedError(f"WebSocket {self.channel_id} is not connected")
        await self.websocket.send_json({"event": event.name, "data": event.data})

    async def close(self) -> None:
        if self.websocket.client_state == WebSocketState.CONNECTED:
            await self.websocket.close()


class EventStreamChannel(NotificationChannel):
    """
    Observer connected over Server-Sent Events.

    Frames are buffered in a bounded queue drained by ``stream()``. A full
    queue means the client stopped reading, so ``send`` fails and the
    broadcaster drops the channel.
    """

    kind = ChannelKind.EVENT_STREAM

    _CLOSE = object()

    def __init__(self, max_queue: int = 100, channel_id: Optional[str] = None):
        super().__init__(channel_id)
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: NotificationEvent) -> None:
        if self._closed:
            raise ChannelClosedError(f"Event stream {self.channel_id} is closed")
        try:
            self._queue.put_nowait(encode_sse(event))
        except asyncio.QueueFull as e:
            raise ChannelClosedError(
                f"Event stream {self.channel_id} is not draining"
            ) from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Unblock the reader; drop a buffered frame if that is what it takes.
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(self._CLOSE)

    async def stream(self) -> AsyncIterator[str]:
        """Yield encoded frames until the channel is closed."""
        while True:
            frame = await self._queue.get()
            if frame is self._CLOSE:
                return
            yield frame
