"""
Notification Broadcaster
========================

Fans events out to every connected observer across both channel kinds.

Features:
    - Membership per channel kind, guarded by a mutex
    - Concurrent delivery with a per-observer write timeout
    - Failed observers are dropped without interrupting the others
    - SSE keep-alive heartbeat (event-stream channels only)

Author: Bladewatch Team
Version: 1.0.0
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from bladewatch.notifications.channels import (
    ChannelKind,
    NotificationChannel,
    NotificationEvent,
)
from shared.schemas.notifications import PING, REPAIR_PLAN_CREATED, RepairPlanCreatedPayload


logger = logging.getLogger(__name__)


@dataclass
class BroadcastReport:
    """Outcome of one broadcast, per channel kind."""

    event: str
    delivered: Dict[ChannelKind, int] = field(default_factory=dict)
    failed: Dict[ChannelKind, int] = field(default_factory=dict)

    @property
    def total_delivered(self) -> int:
        return sum(self.delivered.values())

    @property
    def total_failed(self) -> int:
        return sum(self.failed.values())


class Broadcaster:
    """
    Owns observer membership and delivers events to it.

    Request handlers get the instance through dependency injection
    (see bladewatch.api.dependencies), so tests can swap it out.

    Example:
        broadcaster = Broadcaster(send_timeout=2.0)
        broadcaster.register(WebSocketChannel(ws))
        await broadcaster.broadcast(NotificationEvent("repairplan:created", {...}))
    """

    def __init__(
        self,
        send_timeout: float = 2.0,
        heartbeat_interval: float = 25.0,
    ):
        self.send_timeout = send_timeout
        self.heartbeat_interval = heartbeat_interval
        self._channels: Dict[ChannelKind, Set[NotificationChannel]] = {
            kind: set() for kind in ChannelKind
        }
        self._lock = threading.Lock()
        self._heartbeat_task: Optional[asyncio.Task] = None

    # =========================================================================
    # Membership
    # =========================================================================

    def register(self, channel: NotificationChannel) -> None:
        """Add an observer when its connection opens."""
        with self._lock:
            self._channels[channel.kind].add(channel)
        logger.info(
            f"Observer registered: {channel!r}, counts={self.connection_counts()}"
        )

    def unregister(self, channel: NotificationChannel) -> bool:
        """
        Remove an observer when its connection closes.

        Returns:
            True if the channel was registered
        """
        with self._lock:
            members = self._channels[channel.kind]
            present = channel in members
            members.discard(channel)
        if present:
            logger.info(
                f"Observer unregistered: {channel!r}, counts={self.connection_counts()}"
            )
        return present

    def connection_counts(self) -> Dict[str, int]:
        """Number of observers per channel kind."""
        with self._lock:
            return {kind.value: len(members) for kind, members in self._channels.items()}

    @property
    def total_connections(self) -> int:
        with self._lock:
            return sum(len(members) for members in self._channels.values())

    # =========================================================================
    # Delivery
    # =========================================================================

    async def broadcast(
        self,
        event: NotificationEvent,
        kinds: Iterable[ChannelKind] = tuple(ChannelKind),
    ) -> BroadcastReport:
        """
        Deliver an event to every observer of the given kinds.

        Each kind is delivered independently. An observer whose write fails
        or exceeds ``send_timeout`` is unregistered and closed; the others
        still receive the event.
        """
        kinds = list(kinds)
        with self._lock:
            snapshot = {kind: list(self._channels[kind]) for kind in kinds}

        results = await asyncio.gather(
            *(self._deliver_to(snapshot[kind], event) for kind in kinds)
        )

        report = BroadcastReport(event=event.name)
        dropped: List[NotificationChannel] = []
        for kind, failed in zip(kinds, results):
            report.failed[kind] = len(failed)
            report.delivered[kind] = len(snapshot[kind]) - len(failed)
            dropped.extend(failed)

        for channel in dropped:
            self.unregister(channel)
        await self._close_all(dropped)

        logger.debug(
            f"Broadcast {event.name}: delivered={report.total_delivered}, "
            f"failed={report.total_failed}"
        )
        return report

    async def _deliver_to(
        self,
        channels: List[NotificationChannel],
        event: NotificationEvent,
    ) -> List[NotificationChannel]:
        outcomes = await asyncio.gather(
            *(self._send_one(channel, event) for channel in channels)
        )
        return [channel for channel, ok in zip(channels, outcomes) if not ok]

    async def _send_one(self, channel: NotificationChannel, event: NotificationEvent) -> bool:
        try:
            await asyncio.wait_for(channel.send(event), timeout=self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Observer {channel!r} timed out on {event.name}")
        except Exception as e:
            logger.warning(f"Observer {channel!r} failed on {event.name}: {e}")
        return False

    async def _close_all(self, channels: List[NotificationChannel]) -> None:
        """Close channels concurrently, each bounded by ``send_timeout``."""
        if channels:
            await asyncio.gather(*(self._close_one(channel) for channel in channels))

    async def _close_one(self, channel: NotificationChannel) -> None:
        try:
            await asyncio.wait_for(channel.close(), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Observer {channel!r} did not close within {self.send_timeout}s")
        except Exception as e:
            logger.debug(f"Error closing {channel!r}: {e}")

    async def announce_plan(self, payload: RepairPlanCreatedPayload) -> BroadcastReport:
        """Broadcast a ``repairplan:created`` event on both channel kinds."""
        return await self.broadcast(
            NotificationEvent(REPAIR_PLAN_CREATED, payload.to_wire())
        )

    # =========================================================================
    # Heartbeat
    # =========================================================================

    async def heartbeat(self) -> BroadcastReport:
        """Send one keep-alive ping to event-stream observers."""
        return await self.broadcast(
            NotificationEvent(
                PING,
                {"ok": True, "at": datetime.now(timezone.utc).isoformat()},
            ),
            kinds=(ChannelKind.EVENT_STREAM,),
        )

    async def _heartbeat_loop(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                await self.heartbeat()
            except Exception as e:
                logger.error(f"Heartbeat failed: {e}")

    def start(self) -> None:
        """Start the background heartbeat."""
        if self._heartbeat_task is None or self._heartbeat_task.done():
            self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())
            logger.info(f"Heartbeat started, interval={self.heartbeat_interval}s")

    async def stop(self) -> None:
        """Stop the heartbeat and close every observer."""
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            try:
                await self._heartbeat_task
            except asyncio.CancelledError:
                pass
            self._heartbeat_task = None

        with self._lock:
            channels = [c for members in self._channels.values() for c in members]
            for members in self._channels.values():
                members.clear()

        await self._close_all(channels)
        logger.info(f"Broadcaster stopped, closed {len(channels)} observers")
