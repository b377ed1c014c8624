"""
Bladewatch Repair Plans Module
==============================

Repair plan synthesis from inspection findings.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.repair_plans.synthesizer import (
    PlanGenerationResult,
    PlanSummary,
    RepairPlanService,
    RepairPlanSynthesizer,
    UpsertOutcome,
    classify_priority,
    summarize_findings,
)

__all__ = [
    "PlanGenerationResult",
    "PlanSummary",
    "RepairPlanService",
    "RepairPlanSynthesizer",
    "UpsertOutcome",
    "classify_priority",
    "summarize_findings",
]
