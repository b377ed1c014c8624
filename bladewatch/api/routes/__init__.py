"""
Bladewatch API Routes Package
=============================

FastAPI route modules.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.api.routes.health import router as health_router
from bladewatch.api.routes.inspections import router as inspections_router
from bladewatch.api.routes.findings import router as findings_router
from bladewatch.api.routes.repair_plans import router as repair_plans_router
from bladewatch.api.routes.events import router as events_router

__all__ = [
    "health_router",
    "inspections_router",
    "findings_router",
    "repair_plans_router",
    "events_router",
]
