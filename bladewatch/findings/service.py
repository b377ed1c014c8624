"""
Findings Service
================

Service layer for recording and editing inspection findings.

This service handles:
    - Persisting findings against an existing inspection
    - Applying the severity rule on create and update
    - Reporting the submitted severity when the rule raised it

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db.models import FindingDB, InspectionDB
from bladewatch.exceptions import NotFoundError
from bladewatch.logging import get_logger
from bladewatch.rules.severity import RULE_DESCRIPTION, adjust_severity
from shared.schemas.findings import FindingCreate, FindingResponse, FindingUpdate


logger = logging.getLogger(__name__)
audit_logger = get_logger("bladewatch.findings.rules")


@dataclass
class FindingWriteResult:
    """A persisted finding plus what the severity rule did to it."""

    finding: FindingDB
    submitted_severity: int
    severity_adjusted: bool

    def to_response(self) -> FindingResponse:
        response = FindingResponse.model_validate(self.finding)
        if self.severity_adjusted:
            response.original_severity = self.submitted_severity
            response.severity_adjusted = True
        return response


class FindingsService:
    """
    Service for managing inspection findings.

    Example:
        service = FindingsService(db_session)

        result = await service.create(inspection_id, FindingCreate(
            category="BLADE_DAMAGE", severity=2, estimated_cost=1200,
            notes="Visible crack near the root",
        ))
        result.finding.severity      # 4
        result.severity_adjusted     # True
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the findings service.

        Args:
            db: Async database session
        """
        self.db = db

    async def get(self, finding_id: str) -> Optional[FindingDB]:
        return await self.db.get(FindingDB, finding_id)

    async def create(self, inspection_id: str, payload: FindingCreate) -> FindingWriteResult:
        """
        Record a finding on an inspection.

        Raises:
            NotFoundError: If the inspection does not exist
        """
        if await self.db.get(InspectionDB, inspection_id) is None:
            raise NotFoundError("Inspection", inspection_id)

        effective, adjusted = adjust_severity(
            payload.category, payload.severity, payload.notes
        )
        if adjusted:
            self._log_upgrade(None, payload.category.value, payload.severity, effective)

        finding = FindingDB(
            inspection_id=inspection_id,
            category=payload.category.value,
            severity=effective,
            estimated_cost=payload.estimated_cost,
            notes=payload.notes,
        )
        self.db.add(finding)
        await self.db.flush()
        await self.db.refresh(finding)

        logger.info(f"Created finding {finding.id} on inspection {inspection_id}")
        return FindingWriteResult(finding, payload.severity, adjusted)

    async def update(self, finding_id: str, payload: FindingUpdate) -> FindingWriteResult:
        """
        Edit a finding.

        The rule is evaluated against the merged record (submitted fields
        over stored ones), so a note that now mentions a crack raises the
        stored severity even when no severity was submitted.

        Raises:
            NotFoundError: If the finding does not exist
        """
        finding = await self.get(finding_id)
        if finding is None:
            raise NotFoundError("Finding", finding_id)

        changes = payload.model_dump(exclude_unset=True)

        category = payload.category.value if payload.category else finding.category
        severity = payload.severity if payload.severity is not None else finding.severity
        notes = changes["notes"] if "notes" in changes else finding.notes

        effective, adjusted = adjust_severity(category, severity, notes)
        if adjusted:
            self._log_upgrade(finding.id, category, severity, effective)

        finding.category = category
        finding.severity = effective
        finding.notes = notes
        if payload.estimated_cost is not None:
            finding.estimated_cost = payload.estimated_cost

        await self.db.flush()
        await self.db.refresh(finding)
        return FindingWriteResult(finding, severity, adjusted)

    @staticmethod
    def _log_upgrade(
        finding_id: Optional[str],
        category: str,
        original: int,
        adjusted: int,
    ) -> None:
        audit_logger.info(
            "finding_severity_upgraded",
            finding_id=finding_id,
            category=category,
            original_severity=original,
            adjusted_severity=adjusted,
            rule=RULE_DESCRIPTION,
        )
