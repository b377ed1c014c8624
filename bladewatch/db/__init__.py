"""
Bladewatch Database Layer
=========================

PostgreSQL database layer using SQLAlchemy 2.0 async.

This module provides:
    - Async database session management
    - Base model class for all database entities
    - Turbine, inspection, finding and repair plan models

Usage:
    from bladewatch.db import get_db, AsyncSession

    async def my_endpoint(db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(InspectionDB))
        ...

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.db.session import (
    engine,
    async_session_factory,
    get_db,
    init_db,
    close_db,
    AsyncSession,
)
from bladewatch.db.base import Base
from bladewatch.db.models import (
    TurbineDB,
    InspectionDB,
    FindingDB,
    RepairPlanDB,
)

__all__ = [
    "engine",
    "async_session_factory",
    "get_db",
    "init_db",
    "close_db",
    "AsyncSession",
    "Base",
    "TurbineDB",
    "InspectionDB",
    "FindingDB",
    "RepairPlanDB",
]
