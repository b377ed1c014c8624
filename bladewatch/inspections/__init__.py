"""
Bladewatch Inspections Module
=============================

Inspection scheduling with the one-inspection-per-turbine-per-day guard.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.inspections.overlap import OverlapGuard, normalize_to_date_only
from bladewatch.inspections.service import InspectionService

__all__ = ["OverlapGuard", "normalize_to_date_only", "InspectionService"]
