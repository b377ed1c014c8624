"""
Repair Plan Synthesizer
=======================

Builds the repair plan for an inspection from its findings.

Algorithm:
    1. Load the inspection and its findings (NotFoundError if absent)
    2. Re-apply the severity rule to each finding, in memory only
    3. Total the estimated costs and take the highest effective severity
    4. Classify priority: >= 5 HIGH, >= 3 MEDIUM, otherwise LOW
    5. Upsert the plan keyed by inspection in a single
       INSERT ... ON CONFLICT DO UPDATE ... RETURNING statement
    6. Commit, then announce the plan to observers (best effort)

An inspection without findings gets a LOW plan costing 0.

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from bladewatch.db.base import generate_uuid, utc_now
from bladewatch.db.models import FindingDB, InspectionDB, RepairPlanDB
from bladewatch.exceptions import NotFoundError
from bladewatch.notifications.broadcaster import Broadcaster, BroadcastReport
from bladewatch.rules.severity import adjust_severity
from shared.schemas.notifications import RepairPlanCreatedPayload
from shared.schemas.repair_plans import AdjustedFinding, PlanPriority


logger = logging.getLogger(__name__)

HIGH_PRIORITY_SEVERITY = 5
MEDIUM_PRIORITY_SEVERITY = 3

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UpsertOutcome(str, Enum):
    """Whether generation created the plan row or rewrote it."""
    CREATED = "created"
    REPLACED = "replaced"


@dataclass(frozen=True)
class PlanSummary:
    """Pure aggregate of an inspection's findings."""

    snapshot: List[Dict[str, Any]]
    total_estimated_cost: float
    max_severity: int
    priority: PlanPriority


@dataclass
class PlanGenerationResult:
    """A committed plan, how it was written, and who heard about it."""

    plan: RepairPlanDB
    outcome: UpsertOutcome
    summary: PlanSummary
    broadcast: Optional[BroadcastReport] = field(default=None)

    @property
    def created(self) -> bool:
        return self.outcome is UpsertOutcome.CREATED


def classify_priority(max_severity: int) -> PlanPriority:
    """Map the highest effective severity to a plan priority."""
    if max_severity >= HIGH_PRIORITY_SEVERITY:
        return PlanPriority.HIGH
    if max_severity >= MEDIUM_PRIORITY_SEVERITY:
        return PlanPriority.MEDIUM
    return PlanPriority.LOW


def summarize_findings(findings: Iterable[FindingDB]) -> PlanSummary:
    """
    Aggregate findings into a plan summary.

    Stored findings are not modified; the adjusted severities only live
    in the returned snapshot.
    """
    snapshot: List[Dict[str, Any]] = []
    total = 0.0
    max_severity = 0

    for finding in findings:
        effective, _ = adjust_severity(finding.category, finding.severity, finding.notes)
        cost = finding.estimated_cost or 0.0
        snapshot.append(
            AdjustedFinding(
                id=finding.id,
                category=finding.category,
                severity=effective,
                original_severity=finding.severity,
                estimated_cost=cost,
                notes=finding.notes,
            ).model_dump(mode="json")
        )
        total += cost
        max_severity = max(max_severity, effective)

    return PlanSummary(
        snapshot=snapshot,
        total_estimated_cost=total,
        max_severity=max_severity,
        priority=classify_priority(max_severity),
    )


class RepairPlanSynthesizer:
    """
    Generates and upserts repair plans.

    Example:
        synthesizer = RepairPlanSynthesizer(db_session, broadcaster)
        result = await synthesizer.generate(inspection_id)
        result.plan.priority   # "HIGH"
        result.outcome         # UpsertOutcome.CREATED
    """

    def __init__(self, db: AsyncSession, broadcaster: Optional[Broadcaster] = None):
        self.db = db
        self.broadcaster = broadcaster

    async def generate(self, inspection_id: str) -> PlanGenerationResult:
        """
        Generate (or regenerate) the repair plan for an inspection.

        Raises:
            NotFoundError: If the inspection does not exist
        """
        if await self.db.get(InspectionDB, inspection_id) is None:
            raise NotFoundError("Inspection", inspection_id)

        result = await self.db.execute(
            select(FindingDB)
            .where(FindingDB.inspection_id == inspection_id)
            .order_by(FindingDB.created_at, FindingDB.id)
        )
        summary = summarize_findings(result.scalars().all())

        plan, outcome = await self._upsert(inspection_id, summary)
        await self.db.commit()

        logger.info(
            f"Repair plan {outcome.value} for inspection {inspection_id}: "
            f"id={plan.id}, priority={plan.priority}, "
            f"total={plan.total_estimated_cost}, findings={len(summary.snapshot)}"
        )

        report = await self._announce(plan)
        return PlanGenerationResult(plan, outcome, summary, report)

    async def _upsert(
        self,
        inspection_id: str,
        summary: PlanSummary,
    ) -> tuple[RepairPlanDB, UpsertOutcome]:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Repair plan upsert not supported on {dialect}")

        proposed_id = generate_uuid()
        now = utc_now()

        stmt = insert(RepairPlanDB).values(
            id=proposed_id,
            inspection_id=inspection_id,
            priority=summary.priority.value,
            total_estimated_cost=summary.total_estimated_cost,
            snapshot=summary.snapshot,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["inspection_id"],
            set_={
                "priority": stmt.excluded.priority,
                "total_estimated_cost": stmt.excluded.total_estimated_cost,
                "snapshot": stmt.excluded.snapshot,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(RepairPlanDB)

        rows = await self.db.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        plan = rows.one()
        outcome = UpsertOutcome.CREATED if plan.id == proposed_id else UpsertOutcome.REPLACED
        return plan, outcome

    async def _announce(self, plan: RepairPlanDB) -> Optional[BroadcastReport]:
        if self.broadcaster is None:
            return None

        payload = RepairPlanCreatedPayload(
            id=plan.id,
            inspection_id=plan.inspection_id,
            priority=plan.priority,
            total_estimated_cost=plan.total_estimated_cost,
            created_at=plan.created_at,
        )
        try:
            return await self.broadcaster.announce_plan(payload)
        except Exception as e:
            # The plan is already committed; observers just miss this one.
            logger.error(f"Failed to announce repair plan {plan.id}: {e}")
            return None


class RepairPlanService:
    """Read access to generated repair plans."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, inspection_id: str) -> Optional[RepairPlanDB]:
        result = await self.db.execute(
            select(RepairPlanDB).where(RepairPlanDB.inspection_id == inspection_id)
        )
        return result.scalar_one_or_none()
