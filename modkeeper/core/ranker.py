"""Display ordering for modkeeper reports.

Outdated modules are listed worst-first: every module whose filtered
candidates include an incompatible release comes before any whose worst is
a major bump, and so on down to patch. Ties are broken by module path so
that the output never depends on the order fetches completed in.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from modkeeper.models.report import DependencyReport, RankedReport
from modkeeper.models.version import Version
from modkeeper.utils.logger import get_logger

logger = get_logger("ranker")


def _sort_key(report: DependencyReport) -> Tuple[int, str, Version, str]:
    # Baseline only matters if a manifest lists the same path twice;
    # the verbatim string separates "v1.0.0" from "1.0.0"
    return (
        -int(report.worst_tier),
        report.name,
        report.baseline,
        report.baseline.original,
    )


def rank(reports: Iterable[DependencyReport]) -> Tuple[RankedReport, ...]:
    """Order outdated reports for display and number them from 1.

    Args:
        reports: Reports in any order; current ones are dropped.

    Returns:
        Ranked reports, worst severity first, then by name.
    """
    outdated = [report for report in reports if report.is_outdated]
    ordered = sorted(outdated, key=_sort_key)

    logger.debug("Ranked %d outdated module(s)", len(ordered))
    return tuple(
        RankedReport(rank=position, report=report)
        for position, report in enumerate(ordered, start=1)
    )
