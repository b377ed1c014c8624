"""
Bladewatch Shared Schemas Package
=================================

API and wire-level data types shared across Bladewatch components.

This package provides:
    - Turbine and inspection request/response models
    - Finding request/response models and categories
    - Repair plan output schema and priorities
    - Notification payloads for observers

Author: Bladewatch Team
Version: 1.0.0
"""

from shared.schemas.inspections import (
    DataSource,
    TurbineCreate,
    TurbineResponse,
    InspectionCreate,
    InspectionUpdate,
    InspectionResponse,
)

from shared.schemas.findings import (
    FindingCategory,
    FindingCreate,
    FindingUpdate,
    FindingResponse,
    SEVERITY_MIN,
    SEVERITY_MAX,
)

from shared.schemas.repair_plans import (
    PlanPriority,
    AdjustedFinding,
    RepairPlanResponse,
)

from shared.schemas.notifications import (
    REPAIR_PLAN_CREATED,
    PING,
    RepairPlanCreatedPayload,
)

__all__ = [
    # Turbines & inspections
    "DataSource",
    "TurbineCreate",
    "TurbineResponse",
    "InspectionCreate",
    "InspectionUpdate",
    "InspectionResponse",
    # Findings
    "FindingCategory",
    "FindingCreate",
    "FindingUpdate",
    "FindingResponse",
    "SEVERITY_MIN",
    "SEVERITY_MAX",
    # Repair plans
    "PlanPriority",
    "AdjustedFinding",
    "RepairPlanResponse",
    # Notifications
    "REPAIR_PLAN_CREATED",
    "PING",
    "RepairPlanCreatedPayload",
]
