"""
Severity Rules
==============

Effective-severity rule for inspection findings.

Rule:
    BLADE_DAMAGE findings whose notes mention a crack are never rated
    below CRACK_SEVERITY_FLOOR. Every other finding keeps its severity.

The rule is pure: the same category, severity and notes always produce
the same result, so it can be re-applied on every plan generation.

Author: Bladewatch Team
Version: 1.0.0
"""

from typing import Optional, Tuple, Union

from shared.schemas.findings import FindingCategory


CRACK_MARKER = "crack"
CRACK_SEVERITY_FLOOR = 4
RULE_DESCRIPTION = "BLADE_DAMAGE with crack requires severity >= 4"


def _is_cracked_blade(category: Union[FindingCategory, str], notes: Optional[str]) -> bool:
    if isinstance(category, FindingCategory):
        category = category.value
    if category != FindingCategory.BLADE_DAMAGE.value:
        return False
    return CRACK_MARKER in (notes or "").lower()


def adjust_severity(
    category: Union[FindingCategory, str],
    severity: int,
    notes: Optional[str] = None,
) -> Tuple[int, bool]:
    """
    Compute the effective severity of a finding.

    Args:
        category: Finding category (enum or its string value)
        severity: Raw severity
        notes: Free-text notes, may be None

    Returns:
        (effective_severity, was_adjusted)
    """
    effective = severity
    if _is_cracked_blade(category, notes):
        effective = max(severity, CRACK_SEVERITY_FLOOR)
    return effective, effective != severity
