"""Upgrade classification for modkeeper.

Given the version a module currently declares and every version string the
proxy lists for it, :func:`classify` computes which releases are newer and
how disruptive moving to each one would be.

Tier assignment, in order of precedence:

1. **Incompatible**: the pluggable ``incompatible`` predicate says the
   candidate crosses a breaking boundary (by default Go's ``+incompatible``
   releases on another major epoch).
2. **Major**: the candidate's major number is higher.
3. **Minor**: the candidate's minor number is higher.
4. **Patch**: anything else that is still newer, including pre-release to
   release moves.

Typical usage::

    baseline = Version.parse("v1.2.0")
    for entry in classify(baseline, {"v1.2.1", "v1.3.0", "v2.0.0"}):
        print(entry.version, entry.tier.label)
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Tuple

from modkeeper.exceptions import ParseError
from modkeeper.models.version import (
    ClassifiedVersion,
    Ordering,
    SeverityTier,
    Version,
    VersionKey,
    is_incompatible,
)
from modkeeper.utils.logger import get_logger

logger = get_logger("classifier")

IncompatiblePredicate = Callable[[Version, Version], bool]


def severity_of(
    candidate: Version,
    baseline: Version,
    *,
    incompatible: IncompatiblePredicate = is_incompatible,
) -> SeverityTier:
    """Assign the tier of a candidate already known to be newer than ``baseline``."""
    if incompatible(candidate, baseline):
        return SeverityTier.INCOMPATIBLE
    if candidate.major > baseline.major:
        return SeverityTier.MAJOR
    if candidate.minor > baseline.minor:
        return SeverityTier.MINOR
    return SeverityTier.PATCH


def classify(
    baseline: Version,
    raw_candidates: Iterable[str],
    *,
    incompatible: IncompatiblePredicate = is_incompatible,
) -> Tuple[ClassifiedVersion, ...]:
    """Classify every candidate newer than ``baseline``.

    Unparseable candidates are dropped. Candidates that share
    ``(major, minor, patch, prerelease)`` collapse into the first one seen,
    so ``v1.3.0`` and ``1.3.0+meta`` produce a single entry.

    Args:
        baseline: Version currently declared.
        raw_candidates: Version strings published for the module. Not mutated.
        incompatible: Predicate ``(candidate, baseline) -> bool`` deciding the
            incompatible tier.

    Returns:
        Newer versions with their tiers, strictly ascending.
    """
    unique: Dict[VersionKey, Version] = {}

    for raw in raw_candidates:
        try:
            candidate = Version.parse(raw)
        except ParseError:
            logger.debug("Ignoring unparseable candidate %r", raw)
            continue

        if candidate.compare(baseline) is not Ordering.GREATER:
            continue

        unique.setdefault(candidate.key, candidate)

    ordered: List[Version] = sorted(unique.values())
    return tuple(
        ClassifiedVersion(
            version=candidate,
            tier=severity_of(candidate, baseline, incompatible=incompatible),
        )
        for candidate in ordered
    )
