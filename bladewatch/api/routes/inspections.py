"""
Turbine & Inspection API Routes
===============================

Routes that schedule inspections behind the overlap guard.

Endpoints:
    POST  /api/v1/turbines                              - Register turbine
    GET   /api/v1/turbines/{turbine_id}                 - Get turbine
    POST  /api/v1/turbines/{turbine_id}/inspections     - Schedule inspection
    GET   /api/v1/inspections/{inspection_id}           - Get inspection
    PATCH /api/v1/inspections/{inspection_id}           - Reschedule / edit

Author: Bladewatch Team
Version: 1.0.0
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db import get_db
from bladewatch.inspections.service import InspectionService
from shared.schemas.inspections import (
    InspectionCreate,
    InspectionResponse,
    InspectionUpdate,
    TurbineCreate,
    TurbineResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Inspections"],
    responses={
        404: {"description": "Turbine or inspection not found"},
        409: {"description": "Overlapping inspection"},
    },
)


@router.post(
    "/turbines",
    response_model=TurbineResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register turbine",
)
async def create_turbine(
    request: TurbineCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a turbine so inspections can be scheduled against it."""
    service = InspectionService(db)
    return await service.create_turbine(request)


@router.get(
    "/turbines/{turbine_id}",
    response_model=TurbineResponse,
    summary="Get turbine",
)
async def get_turbine(
    turbine_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = InspectionService(db)
    turbine = await service.get_turbine(turbine_id)
    if turbine is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Turbine not found: {turbine_id}",
        )
    return turbine


@router.post(
    "/turbines/{turbine_id}/inspections",
    response_model=InspectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule inspection",
    description=(
        "Create an inspection for a turbine. Only the UTC calendar date of "
        "`date` is kept; a second inspection on the same day returns 409."
    ),
)
async def create_inspection(
    turbine_id: str,
    request: InspectionCreate,
    db: AsyncSession = Depends(get_db),
):
    service = InspectionService(db)
    return await service.create(turbine_id, request)


@router.get(
    "/inspections/{inspection_id}",
    response_model=InspectionResponse,
    summary="Get inspection",
)
async def get_inspection(
    inspection_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = InspectionService(db)
    inspection = await service.get(inspection_id)
    if inspection is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inspection not found: {inspection_id}",
        )
    return inspection


@router.patch(
    "/inspections/{inspection_id}",
    response_model=InspectionResponse,
    summary="Update inspection",
    description="Edit an inspection. Changing `date` re-runs the overlap check.",
)
async def update_inspection(
    inspection_id: str,
    request: InspectionUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = InspectionService(db)
    return await service.update(inspection_id, request)
