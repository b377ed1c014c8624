"""
Findings API Routes
===================

REST API endpoints for recording and editing inspection findings.

Responses carry ``severity_adjusted`` and, when the severity rule
raised the value, ``original_severity``.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db import get_db
from bladewatch.findings.service import FindingsService
from shared.schemas.findings import FindingCreate, FindingResponse, FindingUpdate


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Findings"],
    responses={404: {"description": "Inspection or finding not found"}},
)


@router.post(
    "/inspections/{inspection_id}/findings",
    response_model=FindingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record finding",
)
async def create_finding(
    inspection_id: str,
    request: FindingCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record a finding; cracked blade damage is raised to severity 4."""
    service = FindingsService(db)
    result = await service.create(inspection_id, request)
    return result.to_response()


@router.get(
    "/findings/{finding_id}",
    response_model=FindingResponse,
    summary="Get finding",
)
async def get_finding(
    finding_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = FindingsService(db)
    finding = await service.get(finding_id)
    if finding is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Finding not found: {finding_id}",
        )
    return finding


@router.patch(
    "/findings/{finding_id}",
    response_model=FindingResponse,
    summary="Update finding",
)
async def update_finding(
    finding_id: str,
    request: FindingUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit a finding; the severity rule runs against the merged values."""
    service = FindingsService(db)
    result = await service.update(finding_id, request)
    return result.to_response()
