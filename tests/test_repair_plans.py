"""
Tests for the Repair Plan Synthesizer
=====================================

Priority classification, cost aggregation, idempotent upsert, and
best-effort notification.

Author: Bladewatch Team
Version: 1.0.0
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from bladewatch.db.models import FindingDB, RepairPlanDB
from bladewatch.exceptions import NotFoundError
from bladewatch.notifications.broadcaster import Broadcaster
from bladewatch.notifications.channels import ChannelKind
from bladewatch.repair_plans.synthesizer import (
    RepairPlanService,
    RepairPlanSynthesizer,
    UpsertOutcome,
    classify_priority,
    summarize_findings,
)
from shared.schemas.repair_plans import PlanPriority

from tests.conftest import RecordingChannel


def _finding(category, severity, cost, notes=None, fid="f-1"):
    return SimpleNamespace(
        id=fid, category=category, severity=severity, estimated_cost=cost, notes=notes,
    )


class TestClassifyPriority:

    @pytest.mark.parametrize(
        "severity,expected",
        [
            (0, PlanPriority.LOW),
            (2, PlanPriority.LOW),
            (3, PlanPriority.MEDIUM),
            (4, PlanPriority.MEDIUM),
            (5, PlanPriority.HIGH),
            (7, PlanPriority.HIGH),
        ],
    )
    def test_thresholds(self, severity, expected):
        assert classify_priority(severity) is expected


class TestSummarizeFindings:

    def test_empty(self):
        summary = summarize_findings([])
        assert summary.total_estimated_cost == 0
        assert summary.max_severity == 0
        assert summary.priority is PlanPriority.LOW
        assert summary.snapshot == []

    def test_rule_reapplied_without_mutating(self):
        stored = _finding("BLADE_DAMAGE", 2, 1000, "crack at root")
        summary = summarize_findings([stored])

        assert summary.max_severity == 4
        assert summary.priority is PlanPriority.MEDIUM
        assert summary.snapshot[0]["severity"] == 4
        assert summary.snapshot[0]["original_severity"] == 2
        assert stored.severity == 2


class TestRepairPlanSynthesizer:

    @pytest.mark.asyncio
    async def test_high_priority_total(self, db, inspection_id, add_finding):
        await add_finding(inspection_id, "BLADE_DAMAGE", 7, 30000)
        await add_finding(inspection_id, "EROSION", 2, 5000)

        result = await RepairPlanSynthesizer(db).generate(inspection_id)

        assert result.outcome is UpsertOutcome.CREATED
        assert result.plan.total_estimated_cost == 35000
        assert result.plan.priority == "HIGH"
        assert len(result.plan.snapshot) == 2

    @pytest.mark.asyncio
    async def test_medium_priority(self, db, inspection_id, add_finding):
        await add_finding(inspection_id, "EROSION", 3, 3000)

        result = await RepairPlanSynthesizer(db).generate(inspection_id)
        assert result.plan.priority == "MEDIUM"
        assert result.plan.total_estimated_cost == 3000

    @pytest.mark.asyncio
    async def test_no_findings(self, db, inspection_id):
        result = await RepairPlanSynthesizer(db).generate(inspection_id)

        assert result.plan.priority == "LOW"
        assert result.plan.total_estimated_cost == 0
        assert result.plan.snapshot == []

    @pytest.mark.asyncio
    async def test_unknown_inspection(self, db):
        with pytest.raises(NotFoundError):
            await RepairPlanSynthesizer(db).generate("missing")

    @pytest.mark.asyncio
    async def test_unadjusted_stored_finding_is_adjusted_in_plan(
        self, db, inspection_id, add_finding
    ):
        finding = await add_finding(inspection_id, "BLADE_DAMAGE", 1, 800, "small crack")

        result = await RepairPlanSynthesizer(db).generate(inspection_id)

        assert result.plan.priority == "MEDIUM"
        assert result.plan.snapshot[0]["severity"] == 4
        stored = await db.get(FindingDB, finding.id)
        assert stored.severity == 1

    @pytest.mark.asyncio
    async def test_regenerate_replaces_in_place(self, db, inspection_id, add_finding):
        await add_finding(inspection_id, "EROSION", 2, 1000)
        synthesizer = RepairPlanSynthesizer(db)

        first = await synthesizer.generate(inspection_id)
        assert first.outcome is UpsertOutcome.CREATED
        assert first.plan.priority == "LOW"
        first_id = first.plan.id

        await add_finding(inspection_id, "LIGHTNING", 6, 9000)
        second = await synthesizer.generate(inspection_id)

        assert second.outcome is UpsertOutcome.REPLACED
        assert second.plan.id == first_id
        assert second.plan.priority == "HIGH"
        assert second.plan.total_estimated_cost == 10000
        assert len(second.plan.snapshot) == 2

        count = await db.scalar(
            select(func.count(RepairPlanDB.id)).where(RepairPlanDB.inspection_id == inspection_id)
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_service_reads_plan(self, db, inspection_id):
        service = RepairPlanService(db)
        assert await service.get(inspection_id) is None

        await RepairPlanSynthesizer(db).generate(inspection_id)
        plan = await service.get(inspection_id)
        assert plan is not None
        assert plan.inspection_id == inspection_id


class TestPlanNotification:

    @pytest.mark.asyncio
    async def test_announces_on_both_channels(self, db, inspection_id, add_finding):
        await add_finding(inspection_id, "EROSION", 3, 3000)
        broadcaster = Broadcaster(send_timeout=0.5)
        ws = RecordingChannel(ChannelKind.WEBSOCKET)
        sse = RecordingChannel(ChannelKind.EVENT_STREAM)
        broadcaster.register(ws)
        broadcaster.register(sse)

        result = await RepairPlanSynthesizer(db, broadcaster).generate(inspection_id)

        assert result.broadcast.total_delivered == 2
        for channel in (ws, sse):
            assert len(channel.events) == 1
            event = channel.events[0]
            assert event.name == "repairplan:created"
            assert event.data["id"] == result.plan.id
            assert event.data["inspectionId"] == inspection_id
            assert event.data["priority"] == "MEDIUM"
            assert event.data["totalEstimatedCost"] == 3000
            assert "createdAt" in event.data

    @pytest.mark.asyncio
    async def test_broadcast_failure_does_not_fail_generation(self, db, inspection_id):
        broadcaster = AsyncMock(spec=Broadcaster)
        broadcaster.announce_plan.side_effect = RuntimeError("fanout exploded")

        result = await RepairPlanSynthesizer(db, broadcaster).generate(inspection_id)

        assert result.broadcast is None
        plan = await RepairPlanService(db).get(inspection_id)
        assert plan is not None
        assert plan.id == result.plan.id

    @pytest.mark.asyncio
    async def test_no_observers(self, db, inspection_id):
        result = await RepairPlanSynthesizer(db, Broadcaster()).generate(inspection_id)
        assert result.broadcast.total_delivered == 0
        assert result.plan.priority == "LOW"
