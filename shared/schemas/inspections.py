"""
Turbine & Inspection Schemas
============================

Request and response models for turbines and inspections, plus the
closed enumerations shared across the platform.

Author: Bladewatch Team
Version: 1.0.0
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DataSource(str, Enum):
    """Where inspection data was captured."""
    DRONE = "DRONE"
    MANUAL = "MANUAL"


class TurbineCreate(BaseModel):
    """Request model for registering a turbine."""

    name: str = Field(..., min_length=1, description="Turbine name")
    manufacturer: Optional[str] = Field(None, description="Manufacturer")
    mw_rating: Optional[float] = Field(None, ge=0.0, description="Rated power (MW)")
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0, description="Latitude")
    lng: Optional[float] = Field(None, ge=-180.0, le=180.0, description="Longitude")


class TurbineResponse(TurbineCreate):
    """Turbine as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


class InspectionCreate(BaseModel):
    """
    Request model for scheduling an inspection.

    ``date`` may carry a time of day; only its UTC calendar date is kept.
    """

    date: datetime = Field(..., description="Inspection date (ISO 8601)")
    data_source: DataSource = Field(..., description="DRONE or MANUAL")
    inspector_name: Optional[str] = Field(None, description="Inspector")
    raw_package_url: Optional[str] = Field(None, description="Raw data package reference")


class InspectionUpdate(BaseModel):
    """Request model for rescheduling or editing an inspection."""

    date: Optional[datetime] = Field(None, description="New inspection date")
    data_source: Optional[DataSource] = None
    inspector_name: Optional[str] = None
    raw_package_url: Optional[str] = None


class InspectionResponse(BaseModel):
    """Inspection as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    turbine_id: str
    date: date
    data_source: DataSource
    inspector_name: Optional[str] = None
    raw_package_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
