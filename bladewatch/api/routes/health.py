"""
Bladewatch Health Routes
========================

Health check endpoints for monitoring and orchestration.

Endpoints:
    GET /health          - Health with database probe and observer counts
    GET /health/live     - Liveness probe

Author: Bladewatch Team
Version: 1.0.0
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.api.dependencies import get_broadcaster
from bladewatch.config import settings
from bladewatch.db import get_db
from bladewatch.db.session import ping_db
from bladewatch.notifications.broadcaster import Broadcaster


router = APIRouter(tags=["Health"])

# Track startup time for uptime calculation
_start_time = time.time()


@router.get("/health", summary="Health Check")
async def health_check(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> Dict[str, Any]:
    """
    Returns overall status, database reachability and observer counts.

    ``degraded`` means the API is up but PostgreSQL is not reachable.
    """
    database_ok = await ping_db(db)
    return {
        "ok": database_ok,
        "status": "healthy" if database_ok else "degraded",
        "service": settings.app_name,
        "version": settings.app_version,
        "uptime_seconds": round(time.time() - _start_time, 1),
        "observers": broadcaster.connection_counts(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/live", summary="Liveness probe")
async def liveness() -> Dict[str, Any]:
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}
