"""
Bladewatch Findings Module
==========================

Finding persistence with the severity rule applied on every write.

Author: Bladewatch Team
Version: 1.0.0
"""

from bladewatch.findings.service import FindingsService, FindingWriteResult

__all__ = ["FindingsService", "FindingWriteResult"]
