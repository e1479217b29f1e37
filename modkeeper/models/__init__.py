"""
Unified data model exports for modkeeper.

Example:
    >>> from modkeeper.models import Version, SeverityTier, DependencyReport
"""

from __future__ import annotations

from modkeeper.models.module import GoModFile, ModuleRequirement
from modkeeper.models.report import DependencyReport, RankedReport, ReportStatus
from modkeeper.models.version import (
    ClassifiedVersion,
    Ordering,
    SeverityTier,
    Version,
    compare,
    is_incompatible,
)

__all__ = [
    "Version",
    "Ordering",
    "SeverityTier",
    "ClassifiedVersion",
    "compare",
    "is_incompatible",
    "DependencyReport",
    "RankedReport",
    "ReportStatus",
    "GoModFile",
    "ModuleRequirement",
]
