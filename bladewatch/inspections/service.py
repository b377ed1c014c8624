"""
Inspection Service
==================

Creates and reschedules inspections behind the overlap guard.

Every write runs the advisory pre-check first and then relies on the
store's unique key. A unique violation raised by the insert or update is
rolled back and reported as the same InspectionConflictError the
pre-check raises.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db.models import InspectionDB, TurbineDB
from bladewatch.exceptions import InspectionConflictError, NotFoundError
from bladewatch.inspections.overlap import OverlapGuard
from shared.schemas.inspections import InspectionCreate, InspectionUpdate, TurbineCreate


logger = logging.getLogger(__name__)


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an IntegrityError came from a unique constraint."""
    # asyncpg: UniqueViolationError / sqlstate 23505; sqlite: "UNIQUE constraint failed"
    sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    if sqlstate == "23505":
        return True
    return "unique" in str(error.orig).lower()


class InspectionService:
    """
    Service for inspection scheduling.

    Example:
        service = InspectionService(db_session)
        inspection = await service.create(turbine_id, InspectionCreate(...))
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = OverlapGuard(db)

    # =========================================================================
    # Turbines (collaborator seam)
    # =========================================================================

    async def create_turbine(self, payload: TurbineCreate) -> TurbineDB:
        """Register a turbine so inspections can be attached to it."""
        turbine = TurbineDB(**payload.model_dump())
        self.db.add(turbine)
        await self.db.flush()
        await self.db.refresh(turbine)
        logger.info(f"Created turbine: {turbine.id}")
        return turbine

    async def get_turbine(self, turbine_id: str) -> Optional[TurbineDB]:
        return await self.db.get(TurbineDB, turbine_id)

    # =========================================================================
    # Inspections
    # =========================================================================

    async def get(self, inspection_id: str) -> Optional[InspectionDB]:
        result = await self.db.execute(
            select(InspectionDB).where(InspectionDB.id == inspection_id)
        )
        return result.scalar_one_or_none()

    async def create(self, turbine_id: str, payload: InspectionCreate) -> InspectionDB:
        """
        Schedule an inspection for a turbine.

        Raises:
            NotFoundError: If the turbine does not exist
            InspectionConflictError: If the turbine already has an inspection that day
        """
        if await self.get_turbine(turbine_id) is None:
            raise NotFoundError("Turbine", turbine_id)

        inspection_date = await self.guard.check_no_overlap(turbine_id, payload.date)

        inspection = InspectionDB(
            turbine_id=turbine_id,
            date=inspection_date,
            inspector_name=payload.inspector_name,
            data_source=payload.data_source.value,
            raw_package_url=payload.raw_package_url,
        )
        self.db.add(inspection)
        await self._flush_or_conflict(turbine_id, inspection_date)
        await self.db.refresh(inspection)

        logger.info(
            f"Created inspection {inspection.id} for turbine {turbine_id} "
            f"on {inspection_date.isoformat()}"
        )
        return inspection

    async def update(self, inspection_id: str, payload: InspectionUpdate) -> InspectionDB:
        """
        Edit an inspection, re-checking overlap when the date changes.

        Raises:
            NotFoundError: If the inspection does not exist
            InspectionConflictError: If the new date clashes with another inspection
        """
        inspection = await self.get(inspection_id)
        if inspection is None:
            raise NotFoundError("Inspection", inspection_id)

        changes = payload.model_dump(exclude_unset=True)

        if changes.get("date") is not None:
            inspection.date = await self.guard.check_no_overlap(
                inspection.turbine_id,
                payload.date,
                exclude_inspection_id=inspection.id,
            )
        if changes.get("data_source") is not None:
            inspection.data_source = payload.data_source.value
        if "inspector_name" in changes:
            inspection.inspector_name = payload.inspector_name
        if "raw_package_url" in changes:
            inspection.raw_package_url = payload.raw_package_url

        await self._flush_or_conflict(inspection.turbine_id, inspection.date)
        await self.db.refresh(inspection)
        return inspection

    async def _flush_or_conflict(self, turbine_id: str, inspection_date) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e):
                raise
            logger.warning(
                f"Unique constraint rejected inspection for turbine {turbine_id} "
                f"on {inspection_date.isoformat()}"
            )
            raise InspectionConflictError(
                turbine_id, inspection_date, source="constraint"
            ) from e
