"""
Repair Plan API Routes
======================

Endpoints:
    POST /api/v1/repair-plans/{inspection_id}  - Generate or regenerate
    GET  /api/v1/repair-plans/{inspection_id}  - Get current plan

Generation returns 201 when the plan is created and 200 when an existing
plan is replaced in place.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.api.dependencies import get_broadcaster
from bladewatch.db import get_db
from bladewatch.notifications.broadcaster import Broadcaster
from bladewatch.repair_plans.synthesizer import RepairPlanService, RepairPlanSynthesizer
from shared.schemas.repair_plans import RepairPlanResponse


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/repair-plans",
    tags=["Repair Plans"],
    responses={404: {"description": "Inspection or plan not found"}},
)


@router.post(
    "/{inspection_id}",
    response_model=RepairPlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate repair plan",
    description=(
        "Synthesize the repair plan from the inspection's findings and "
        "announce it on /ws/repairplans and /sse/repairplans."
    ),
)
async def generate_repair_plan(
    inspection_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    synthesizer = RepairPlanSynthesizer(db, broadcaster)
    result = await synthesizer.generate(inspection_id)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result.plan


@router.get(
    "/{inspection_id}",
    response_model=RepairPlanResponse,
    summary="Get repair plan",
)
async def get_repair_plan(
    inspection_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = RepairPlanService(db)
    plan = await service.get(inspection_id)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Repair plan not found for inspection: {inspection_id}",
        )
    return plan
