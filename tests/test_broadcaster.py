"""
Tests for the Notification Broadcaster
======================================

Tests observer membership, fan-out across channel kinds, dropping of
failed observers, and the SSE heartbeat.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketState

from bladewatch.exceptions import ChannelClosedError
from bladewatch.notifications.broadcaster import Broadcaster
from bladewatch.notifications.channels import (
    ChannelKind,
    EventStreamChannel,
    NotificationEvent,
    WebSocketChannel,
    encode_sse,
)

from tests.conftest import RecordingChannel


class StuckChannel(RecordingChannel):
    """Observer whose transport never completes a send or a close."""

    async def send(self, event: NotificationEvent) -> None:
        await asyncio.sleep(3600)

    async def close(self) -> None:
        await asyncio.sleep(3600)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def broadcaster():
    """Create a fresh Broadcaster with a short write timeout."""
    return Broadcaster(send_timeout=0.2, heartbeat_interval=0.05)


@pytest.fixture
def mock_ws():
    """Create a mock WebSocket connection."""
    ws = AsyncMock()
    ws.client_state = WebSocketState.CONNECTED
    ws.send_json = AsyncMock()
    ws.close = AsyncMock()
    return ws


EVENT = NotificationEvent("repairplan:created", {"id": "plan-1", "priority": "HIGH"})


# =============================================================================
# Membership
# =============================================================================

class TestMembership:

    def test_initial_state(self, broadcaster):
        assert broadcaster.total_connections == 0
        assert broadcaster.connection_counts() == {"websocket": 0, "event_stream": 0}

    def test_register_by_kind(self, broadcaster):
        broadcaster.register(RecordingChannel(ChannelKind.WEBSOCKET))
        broadcaster.register(RecordingChannel(ChannelKind.WEBSOCKET))
        broadcaster.register(RecordingChannel(ChannelKind.EVENT_STREAM))

        assert broadcaster.connection_counts() == {"websocket": 2, "event_stream": 1}
        assert broadcaster.total_connections == 3

    def test_unregister(self, broadcaster):
        channel = RecordingChannel()
        broadcaster.register(channel)

        assert broadcaster.unregister(channel) is True
        assert broadcaster.total_connections == 0

    def test_unregister_unknown_is_noop(self, broadcaster):
        assert broadcaster.unregister(RecordingChannel()) is False

    def test_total_connections_reads_under_lock(self, broadcaster):
        broadcaster.register(RecordingChannel())
        broadcaster._lock = MagicMock()

        assert broadcaster.total_connections == 1
        broadcaster._lock.__enter__.assert_called_once()


# =============================================================================
# Delivery
# =============================================================================

class TestBroadcast:

    @pytest.mark.asyncio
    async def test_reaches_both_kinds(self, broadcaster):
        ws = RecordingChannel(ChannelKind.WEBSOCKET)
        sse = RecordingChannel(ChannelKind.EVENT_STREAM)
        broadcaster.register(ws)
        broadcaster.register(sse)

        report = await broadcaster.broadcast(EVENT)

        assert report.total_delivered == 2
        assert report.total_failed == 0
        assert ws.events == [EVENT]
        assert sse.events == [EVENT]

    @pytest.mark.asyncio
    async def test_no_observers(self, broadcaster):
        report = await broadcaster.broadcast(EVENT)
        assert report.total_delivered == 0
        assert report.total_failed == 0

    @pytest.mark.asyncio
    async def test_failed_observer_dropped(self, broadcaster):
        healthy = [RecordingChannel() for _ in range(3)]
        broken = RecordingChannel(fail=True)
        for channel in healthy + [broken]:
            broadcaster.register(channel)

        report = await broadcaster.broadcast(EVENT)

        assert report.delivered[ChannelKind.WEBSOCKET] == 3
        assert report.failed[ChannelKind.WEBSOCKET] == 1
        assert all(channel.events == [EVENT] for channel in healthy)
        assert broken.closed is True
        assert broadcaster.connection_counts()["websocket"] == 3

    @pytest.mark.asyncio
    async def test_slow_observer_dropped(self, broadcaster):
        fast = RecordingChannel(ChannelKind.EVENT_STREAM)
        slow = RecordingChannel(ChannelKind.EVENT_STREAM, delay=1.0)
        broadcaster.register(fast)
        broadcaster.register(slow)

        report = await broadcaster.broadcast(EVENT)

        assert report.delivered[ChannelKind.EVENT_STREAM] == 1
        assert fast.events == [EVENT]
        assert slow.events == []
        assert slow.closed is True
        assert broadcaster.total_connections == 1

    @pytest.mark.asyncio
    async def test_stuck_observer_does_not_stall_broadcast(self, broadcaster):
        healthy = RecordingChannel(ChannelKind.WEBSOCKET)
        stuck = StuckChannel(ChannelKind.WEBSOCKET)
        broadcaster.register(healthy)
        broadcaster.register(stuck)

        report = await asyncio.wait_for(broadcaster.broadcast(EVENT), timeout=2.0)

        assert report.delivered[ChannelKind.WEBSOCKET] == 1
        assert report.failed[ChannelKind.WEBSOCKET] == 1
        assert healthy.events == [EVENT]
        assert broadcaster.connection_counts()["websocket"] == 1

    @pytest.mark.asyncio
    async def test_stuck_observers_closed_concurrently(self, broadcaster):
        for _ in range(5):
            broadcaster.register(StuckChannel(ChannelKind.EVENT_STREAM))

        loop = asyncio.get_running_loop()
        started = loop.time()
        report = await asyncio.wait_for(broadcaster.broadcast(EVENT), timeout=2.0)

        assert report.failed[ChannelKind.EVENT_STREAM] == 5
        assert broadcaster.total_connections == 0
        # One send timeout plus one close timeout, not one per observer.
        assert loop.time() - started < 1.0

    @pytest.mark.asyncio
    async def test_failure_in_one_kind_spares_the_other(self, broadcaster):
        broken_ws = RecordingChannel(ChannelKind.WEBSOCKET, fail=True)
        sse = RecordingChannel(ChannelKind.EVENT_STREAM)
        broadcaster.register(broken_ws)
        broadcaster.register(sse)

        report = await broadcaster.broadcast(EVENT)

        assert report.failed[ChannelKind.WEBSOCKET] == 1
        assert report.delivered[ChannelKind.EVENT_STREAM] == 1
        assert sse.events == [EVENT]


class TestHeartbeat:

    @pytest.mark.asyncio
    async def test_pings_event_streams_only(self, broadcaster):
        ws = RecordingChannel(ChannelKind.WEBSOCKET)
        sse = RecordingChannel(ChannelKind.EVENT_STREAM)
        broadcaster.register(ws)
        broadcaster.register(sse)

        await broadcaster.heartbeat()

        assert ws.events == []
        assert len(sse.events) == 1
        assert sse.events[0].name == "ping"
        assert sse.events[0].data["ok"] is True

    @pytest.mark.asyncio
    async def test_background_loop(self, broadcaster):
        sse = RecordingChannel(ChannelKind.EVENT_STREAM)
        broadcaster.register(sse)

        broadcaster.start()
        await asyncio.sleep(0.2)
        await broadcaster.stop()

        assert len(sse.events) >= 1
        assert sse.closed is True
        assert broadcaster.total_connections == 0

    @pytest.mark.asyncio
    async def test_stop_with_stuck_observer(self, broadcaster):
        healthy = RecordingChannel(ChannelKind.WEBSOCKET)
        broadcaster.register(healthy)
        broadcaster.register(StuckChannel(ChannelKind.EVENT_STREAM))

        await asyncio.wait_for(broadcaster.stop(), timeout=2.0)

        assert healthy.closed is True
        assert broadcaster.total_connections == 0

    @pytest.mark.asyncio
    async def test_stop_closes_everyone(self, broadcaster):
        channels = [
            RecordingChannel(ChannelKind.WEBSOCKET),
            RecordingChannel(ChannelKind.EVENT_STREAM),
        ]
        for channel in channels:
            broadcaster.register(channel)

        await broadcaster.stop()

        assert all(channel.closed for channel in channels)
        assert broadcaster.total_connections == 0


# =============================================================================
# Channels
# =============================================================================

class TestEventStreamChannel:

    def test_encode_sse(self):
        frame = encode_sse(NotificationEvent("repairplan:created", {"id": "p1"}))
        assert frame == 'event: repairplan:created\ndata: {"id": "p1"}\n\n'

    @pytest.mark.asyncio
    async def test_stream_yields_frames_until_closed(self):
        channel = EventStreamChannel(max_queue=10)
        await channel.send(EVENT)
        await channel.close()

        frames = [frame async for frame in channel.stream()]

        assert frames == [encode_sse(EVENT)]
        assert channel.closed is True

    @pytest.mark.asyncio
    async def test_full_queue_fails_send(self):
        channel = EventStreamChannel(max_queue=1)
        await channel.send(EVENT)

        with pytest.raises(ChannelClosedError):
            await channel.send(EVENT)

    @pytest.mark.asyncio
    async def test_send_after_close_fails(self):
        channel = EventStreamChannel()
        await channel.close()

        with pytest.raises(ChannelClosedError):
            await channel.send(EVENT)

    @pytest.mark.asyncio
    async def test_close_on_full_queue_still_ends_stream(self):
        channel = EventStreamChannel(max_queue=1)
        await channel.send(EVENT)
        await channel.close()

        frames = [frame async for frame in channel.stream()]
        assert frames == []


class TestWebSocketChannel:

    @pytest.mark.asyncio
    async def test_send_json_frame(self, mock_ws):
        channel = WebSocketChannel(mock_ws)
        await channel.send(EVENT)

        mock_ws.send_json.assert_awaited_once_with(
            {"event": "repairplan:created", "data": {"id": "plan-1", "priority": "HIGH"}}
        )

    @pytest.mark.asyncio
    async def test_disconnected_socket_fails(self, mock_ws):
        mock_ws.client_state = WebSocketState.DISCONNECTED
        channel = WebSocketChannel(mock_ws)

        with pytest.raises(ChannelClosedError):
            await channel.send(EVENT)
        mock_ws.send_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_broken_socket_dropped_by_broadcaster(self, broadcaster, mock_ws):
        mock_ws.send_json.side_effect = RuntimeError("connection reset")
        channel = WebSocketChannel(mock_ws)
        broadcaster.register(channel)

        report = await broadcaster.broadcast(EVENT)

        assert report.total_failed == 1
        assert broadcaster.total_connections == 0
        mock_ws.close.assert_awaited_once()
