"""
pytest configuration and fixtures.

Store-backed tests run against an in-memory SQLite database through
aiosqlite; SQLite enforces the same unique keys and supports the
ON CONFLICT ... RETURNING upsert used for repair plans.

Author: Bladewatch Team
Version: 1.0.0
"""

import asyncio
from datetime import date
from typing import List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from bladewatch.db.base import Base
from bladewatch.db.models import FindingDB, InspectionDB, TurbineDB
from bladewatch.exceptions import ChannelClosedError
from bladewatch.notifications.channels import (
    ChannelKind,
    NotificationChannel,
    NotificationEvent,
)


class RecordingChannel(NotificationChannel):
    """In-memory observer that records what it receives."""

    def __init__(
        self,
        kind: ChannelKind = ChannelKind.WEBSOCKET,
        fail: bool = False,
        delay: float = 0.0,
    ):
        super().__init__()
        self.kind = kind
        self.fail = fail
        self.delay = delay
        self.events: List[NotificationEvent] = []
        self.closed = False

    async def send(self, event: NotificationEvent) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ChannelClosedError("remote end vanished")
        self.events.append(event)

    async def close(self) -> None:
        self.closed = True


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def turbine_id(db) -> str:
    """A committed turbine."""
    turbine = TurbineDB(
        name="Test Turbine",
        manufacturer="TestGen",
        mw_rating=3.0,
        lat=40.7128,
        lng=-74.006,
    )
    db.add(turbine)
    await db.commit()
    return turbine.id


@pytest_asyncio.fixture
async def inspection_id(db, turbine_id) -> str:
    """A committed inspection without findings."""
    inspection = InspectionDB(
        turbine_id=turbine_id,
        date=date(2025, 1, 15),
        inspector_name="John Doe",
        data_source="DRONE",
    )
    db.add(inspection)
    await db.commit()
    return inspection.id


@pytest.fixture
def add_finding(db):
    """Insert a finding row exactly as given (no rule applied)."""

    async def _add(inspection_id: str, category: str, severity: int, cost: float, notes=None):
        finding = FindingDB(
            inspection_id=inspection_id,
            category=category,
            severity=severity,
            estimated_cost=cost,
            notes=notes,
        )
        db.add(finding)
        await db.commit()
        return finding

    return _add
