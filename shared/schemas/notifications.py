"""
Notification Wire Schemas
=========================

Payloads pushed to observers over the WebSocket and SSE channels.
Field names are camelCase on the wire.

Author: Bladewatch Team
Version: 1.0.0
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shared.schemas.repair_plans import PlanPriority


REPAIR_PLAN_CREATED = "repairplan:created"
PING = "ping"


class RepairPlanCreatedPayload(BaseModel):
    """Body of a ``repairplan:created`` event."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    inspection_id: str
    priority: PlanPriority
    total_estimated_cost: float
    created_at: datetime

    def to_wire(self) -> dict:
        """Serialize with camelCase keys and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)
