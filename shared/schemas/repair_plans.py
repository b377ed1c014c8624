"""
Repair Plan Schemas
===================

Priority classification and the repair plan output contract.

Author: Bladewatch Team
Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.schemas.findings import FindingCategory


class PlanPriority(str, Enum):
    """Repair plan priority levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AdjustedFinding(BaseModel):
    """One entry of a plan's findings snapshot, with the rule applied."""

    id: str
    category: FindingCategory
    severity: int = Field(..., description="Effective severity at generation time")
    original_severity: int = Field(..., description="Severity as stored on the finding")
    estimated_cost: float
    notes: Optional[str] = None


class RepairPlanResponse(BaseModel):
    """Repair plan as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    inspection_id: str
    priority: PlanPriority
    total_estimated_cost: float
    snapshot: List[AdjustedFinding] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
