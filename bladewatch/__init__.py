"""
Bladewatch Core Package
=======================

Wind-turbine inspection tracking and repair planning engine.

This package contains:
    - api/: FastAPI REST, WebSocket and SSE layer
    - db/: Async SQLAlchemy models and session management
    - rules/: Finding severity rules
    - inspections/: Inspection overlap guard and service
    - findings/: Finding service (severity rule applied on write)
    - repair_plans/: Repair plan synthesis and upsert
    - notifications/: Dual-channel plan notification broadcaster

Author: Bladewatch Team
Version: 1.0.0
"""

__version__ = "1.0.0"
