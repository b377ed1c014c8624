"""
Bladewatch Rules Module
=======================

Deterministic finding rules applied on write and at plan generation.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.rules.severity import adjust_severity, CRACK_SEVERITY_FLOOR

__all__ = ["adjust_severity", "CRACK_SEVERITY_FLOOR"]
