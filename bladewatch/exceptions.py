"""
Bladewatch Exceptions
=====================

Domain error hierarchy shared by the services and mapped to HTTP
responses in bladewatch.api.main.

Author: Bladewatch Team
Version: 1.0.0
"""

from typing import Optional


class BladewatchError(Exception):
    """Base class for all Bladewatch domain errors."""


class NotFoundError(BladewatchError, LookupError):
    """Raised when a referenced turbine, inspection, finding or plan is absent."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class ConflictError(BladewatchError):
    """Raised when a write would violate a uniqueness invariant."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class InspectionConflictError(ConflictError):
    """
    Another inspection already exists for the turbine on that calendar date.

    ``source`` is ``"precheck"`` when the advisory lookup found the clash
    and ``"constraint"`` when the store's unique key rejected the write.
    """

    MESSAGE = "Overlapping inspection already exists for this turbine on this date"

    def __init__(self, turbine_id: str, inspection_date, source: str = "precheck"):
        self.turbine_id = turbine_id
        self.inspection_date = inspection_date
        self.source = source
        detail = None
        if source == "constraint":
            detail = (
                "An inspection for this turbine on this date already exists "
                "in the database"
            )
        super().__init__(self.MESSAGE, detail)


class ChannelClosedError(BladewatchError):
    """Raised by a notification channel that can no longer accept events."""
