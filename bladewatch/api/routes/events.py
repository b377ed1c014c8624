"""
Real-Time Repair Plan Events
============================

Observer endpoints for ``repairplan:created`` notifications.

    WS  /ws/repairplans    - Preferred, bidirectional
    GET /sse/repairplans   - Server-Sent Events fallback
    GET /api/events        - Legacy SSE alias

Clients try the WebSocket first and fall back to SSE when it cannot be
established. Both deliver the same event payload; SSE also carries a
periodic ``ping`` that clients ignore.

Author: Bladewatch Team
Version: 1.0.0
"""

import json
import logging
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.responses import StreamingResponse

from bladewatch.api.dependencies import get_broadcaster
from bladewatch.config import settings
from bladewatch.notifications.broadcaster import Broadcaster
from bladewatch.notifications.channels import (
    EventStreamChannel,
    NotificationEvent,
    WebSocketChannel,
    encode_sse,
)
from shared.schemas.notifications import PING


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Events"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


# =============================================================================
# WebSocket
# =============================================================================

@router.websocket("/ws/repairplans")
async def repair_plans_ws(
    websocket: WebSocket,
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    WebSocket endpoint for repair plan events.

    Server messages: {"event": "<name>", "data": {...}}
    Client messages are ignored apart from keeping the socket open.
    """
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    broadcaster.register(channel)

    try:
        await websocket.send_json({
            "event": "connected",
            "data": {
                "channel_id": channel.channel_id,
                "at": datetime.now(timezone.utc).isoformat(),
            },
        })
        while True:
            message = await websocket.receive_text()
            try:
                data = json.loads(message)
            except ValueError:
                continue
            if isinstance(data, dict) and data.get("type") == "pong":
                continue
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error on {channel!r}: {e}")
    finally:
        broadcaster.unregister(channel)


# =============================================================================
# Server-Sent Events
# =============================================================================

async def _event_frames(
    broadcaster: Broadcaster,
    channel: EventStreamChannel,
    hello: dict,
) -> AsyncIterator[str]:
    """
    Body of an SSE response: a hello ``ping`` then every queued frame.

    The channel is registered when the body starts, inside the same
    try/finally that unregisters it, so a client that leaves before the
    first frame leaves no member behind.
    """
    try:
        broadcaster.register(channel)
        yield encode_sse(NotificationEvent(PING, hello))
        async for frame in channel.stream():
            yield frame
    finally:
        broadcaster.unregister(channel)
        await channel.close()


def _open_event_stream(broadcaster: Broadcaster, hello: dict) -> StreamingResponse:
    channel = EventStreamChannel(max_queue=settings.sse_queue_size)
    return StreamingResponse(
        _event_frames(broadcaster, channel, hello),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get(
    "/sse/repairplans",
    summary="Repair plan event stream",
    description="Server-Sent Events fallback for clients without WebSocket.",
)
async def repair_plans_sse(broadcaster: Broadcaster = Depends(get_broadcaster)):
    return _open_event_stream(
        broadcaster,
        {"ok": True, "at": datetime.now(timezone.utc).isoformat()},
    )


@router.get("/api/events", include_in_schema=False)
async def legacy_events_sse(broadcaster: Broadcaster = Depends(get_broadcaster)):
    """Legacy SSE endpoint kept for older dashboards."""
    return _open_event_stream(broadcaster, {"ok": True})
