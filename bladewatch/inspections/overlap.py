"""
Inspection Overlap Guard
========================

Advisory check that a turbine has no other inspection on a calendar date.

Dates are compared at day granularity in UTC. The lookup here only gives
callers a fast, friendly rejection; the authoritative check is the
``uq_inspections_turbine_date`` unique key, which InspectionService
remaps to the same conflict when two writers race past this check.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db.models import InspectionDB
from bladewatch.exceptions import InspectionConflictError


logger = logging.getLogger(__name__)

DateLike = Union[datetime, date, str]


def normalize_to_date_only(value: DateLike) -> date:
    """
    Reduce a timestamp to its UTC calendar date.

    Naive datetimes are taken to be UTC. Strings are parsed as ISO 8601,
    including a trailing ``Z``.

    Raises:
        ValueError: If a string cannot be parsed
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(timezone.utc).date()

    return value


class OverlapGuard:
    """
    Pre-check for inspection date overlaps.

    Example:
        guard = OverlapGuard(db)
        day = await guard.check_no_overlap(turbine_id, "2025-01-15T02:00:00Z")
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_overlap(
        self,
        turbine_id: str,
        inspection_date: date,
        exclude_inspection_id: Optional[str] = None,
    ) -> Optional[InspectionDB]:
        """Return an existing inspection on that turbine and date, if any."""
        stmt = (
            select(InspectionDB)
            .where(InspectionDB.turbine_id == turbine_id)
            .where(InspectionDB.date == inspection_date)
        )
        if exclude_inspection_id:
            stmt = stmt.where(InspectionDB.id != exclude_inspection_id)

        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def check_no_overlap(
        self,
        turbine_id: str,
        when: DateLike,
        exclude_inspection_id: Optional[str] = None,
    ) -> date:
        """
        Ensure no other inspection exists for the turbine on ``when``.

        Args:
            turbine_id: Turbine identifier
            when: Proposed inspection timestamp or date
            exclude_inspection_id: Inspection being rescheduled, ignored in the lookup

        Returns:
            The normalized calendar date

        Raises:
            InspectionConflictError: If an overlapping inspection exists
        """
        inspection_date = normalize_to_date_only(when)
        existing = await self.find_overlap(
            turbine_id, inspection_date, exclude_inspection_id
        )
        if existing is not None:
            logger.info(
                f"Inspection overlap for turbine {turbine_id} on "
                f"{inspection_date.isoformat()} (existing: {existing.id})"
            )
            raise InspectionConflictError(turbine_id, inspection_date, source="precheck")
        return inspection_date
