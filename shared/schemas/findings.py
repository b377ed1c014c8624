"""
Finding Schemas
===============

Request and response models for inspection findings.

The response echoes both the stored (effective) severity and, when the
severity rule raised it, the severity the caller originally submitted.

Author: Bladewatch Team
Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


SEVERITY_MIN = 1
SEVERITY_MAX = 10


class FindingCategory(str, Enum):
    """Defect categories recorded during inspections."""
    BLADE_DAMAGE = "BLADE_DAMAGE"
    LIGHTNING = "LIGHTNING"
    EROSION = "EROSION"
    UNKNOWN = "UNKNOWN"


class FindingCreate(BaseModel):
    """Request model for recording a finding."""

    category: FindingCategory = Field(..., description="Defect category")
    severity: int = Field(
        ...,
        ge=SEVERITY_MIN,
        le=SEVERITY_MAX,
        description="Raw severity as assessed by the inspector",
    )
    estimated_cost: float = Field(..., ge=0.0, description="Estimated repair cost")
    notes: Optional[str] = Field(None, description="Free-text notes")


class FindingUpdate(BaseModel):
    """Request model for editing a finding. Omitted fields are unchanged."""

    category: Optional[FindingCategory] = None
    severity: Optional[int] = Field(None, ge=SEVERITY_MIN, le=SEVERITY_MAX)
    estimated_cost: Optional[float] = Field(None, ge=0.0)
    notes: Optional[str] = None


class FindingResponse(BaseModel):
    """Finding as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    inspection_id: str
    category: FindingCategory
    severity: int = Field(..., description="Effective severity")
    estimated_cost: float
    notes: Optional[str] = None
    original_severity: Optional[int] = Field(
        None,
        description="Submitted severity, present only when the rule raised it",
    )
    severity_adjusted: bool = False
    created_at: datetime
    updated_at: datetime
