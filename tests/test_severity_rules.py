"""
Tests for the Severity Rule
===========================

Cracked blade damage is floored at severity 4; nothing else changes.

Author: Bladewatch Team
Version: 1.0.0
"""

import pytest

from bladewatch.rules.severity import CRACK_SEVERITY_FLOOR, adjust_severity
from shared.schemas.findings import FindingCategory


class TestAdjustSeverity:
    """Rule behaviour for each category and note combination."""

    def test_crack_raises_low_severity(self):
        assert adjust_severity(FindingCategory.BLADE_DAMAGE, 2, "visible crack") == (4, True)

    def test_crack_keeps_high_severity(self):
        assert adjust_severity(FindingCategory.BLADE_DAMAGE, 5, "visible crack") == (5, False)

    def test_severity_at_floor_not_flagged(self):
        assert adjust_severity("BLADE_DAMAGE", 4, "crack") == (4, False)

    def test_blade_damage_without_crack(self):
        assert adjust_severity(FindingCategory.BLADE_DAMAGE, 2, "no issue") == (2, False)

    def test_case_insensitive_substring(self):
        assert adjust_severity("BLADE_DAMAGE", 1, "Hairline CRACKING at root") == (4, True)

    def test_missing_notes(self):
        assert adjust_severity(FindingCategory.BLADE_DAMAGE, 1, None) == (1, False)

    @pytest.mark.parametrize(
        "category",
        [FindingCategory.EROSION, FindingCategory.LIGHTNING, FindingCategory.UNKNOWN],
    )
    def test_other_categories_unchanged(self, category):
        assert adjust_severity(category, 1, "huge crack everywhere") == (1, False)
        assert adjust_severity(category.value, 3, "crack") == (3, False)

    def test_deterministic(self):
        first = adjust_severity("BLADE_DAMAGE", 2, "crack on leading edge")
        second = adjust_severity("BLADE_DAMAGE", 2, "crack on leading edge")
        assert first == second

    def test_floor_constant(self):
        assert CRACK_SEVERITY_FLOOR == 4
