"""
Dependency report data model for modkeeper.

A :class:`DependencyReport` is built once per declared module per run. It
keeps both the true classified candidate set and the filtered view that
drives status and ranking, so severity statistics are never skewed by the
display filter.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from modkeeper.models.version import ClassifiedVersion, SeverityTier, Version


class ReportStatus(enum.Enum):
    """Whether a dependency has newer releases left after filtering."""

    CURRENT = "current"
    OUTDATED = "outdated"


@dataclass(frozen=True)
class DependencyReport:
    """
    Classified upgrade options for a single module.

    Attributes:
        name: Module path, unique within a manifest.
        baseline: Version currently declared in the manifest.
        candidates: Newer versions that passed the filter, ascending.
        all_candidates: Every newer version, ascending, before filtering.
    """

    name: str
    baseline: Version
    candidates: Tuple[ClassifiedVersion, ...] = ()
    all_candidates: Tuple[ClassifiedVersion, ...] = ()

    @property
    def status(self) -> ReportStatus:
        """``CURRENT`` iff no candidate survived filtering."""
        return ReportStatus.OUTDATED if self.candidates else ReportStatus.CURRENT

    @property
    def is_outdated(self) -> bool:
        return self.status is ReportStatus.OUTDATED

    @property
    def worst_tier(self) -> Optional[SeverityTier]:
        """Most severe tier among the filtered candidates."""
        if not self.candidates:
            return None
        return max(candidate.tier for candidate in self.candidates)

    @property
    def latest(self) -> Optional[Version]:
        """Newest filtered candidate, if any."""
        return self.candidates[-1].version if self.candidates else None

    @property
    def hidden_count(self) -> int:
        """Number of newer versions removed by the filter."""
        return len(self.all_candidates) - len(self.candidates)

    def tier_counts(self) -> Dict[SeverityTier, int]:
        """Count the true (unfiltered) candidates per tier."""
        counts: Dict[SeverityTier, int] = {}
        for candidate in self.all_candidates:
            counts[candidate.tier] = counts.get(candidate.tier, 0) + 1
        return counts

    def to_json(self) -> Dict[str, Any]:
        """
        Serialize the report to a JSON-compatible dictionary.

        Returns:
            JSON-safe report representation.
        """
        versions: List[Dict[str, str]] = [
            {"version": c.version.original, "tier": c.tier.label}
            for c in self.candidates
        ]
        entry: Dict[str, Any] = {
            "name": self.name,
            "current_version": self.baseline.original,
            "status": self.status.value,
            "versions": versions,
        }
        if self.worst_tier is not None:
            entry["worst_tier"] = self.worst_tier.label
        if self.hidden_count:
            entry["hidden"] = self.hidden_count
        counts = self.tier_counts()
        if counts:
            entry["tier_counts"] = {tier.label: counts[tier] for tier in sorted(counts)}
        return entry

    def __str__(self) -> str:
        if not self.candidates:
            return f"{self.name} {self.baseline.original} (current)"
        return (
            f"{self.name} {self.baseline.original} -> "
            f"{self.latest.original} ({self.worst_tier.label})"
        )


@dataclass(frozen=True)
class RankedReport:
    """
    A report positioned for display.

    The rank is presentation metadata only; it is not part of the report.

    Attributes:
        rank: 1-based display position.
        report: The ranked dependency report.
    """

    rank: int
    report: DependencyReport

    @property
    def name(self) -> str:
        return self.report.name

    @property
    def current_version(self) -> str:
        return self.report.baseline.original

    @property
    def versions(self) -> List[Tuple[str, SeverityTier]]:
        """Filtered candidates as ``(version string, tier)`` pairs."""
        return [candidate.as_pair() for candidate in self.report.candidates]

    def to_json(self) -> Dict[str, Any]:
        entry = {"rank": self.rank}
        entry.update(self.report.to_json())
        return entry
