"""Per-module evaluation for modkeeper.

:class:`DependencyEvaluator` turns one declared module and the version list
fetched for it into a :class:`DependencyReport`. Classification always runs
on the full candidate set first; the :class:`VersionFilter` is applied
afterwards, so a report keeps its true severity picture in
``all_candidates`` even when the filter hides everything.

Each module evolves independently::

    Unresolved -> Excluded   (declared version does not parse)
               -> Current    (nothing newer survives the filter)
               -> Outdated   (at least one newer version survives)

Typical usage::

    evaluator = DependencyEvaluator(VersionFilter.from_config(config))
    report = evaluator.evaluate("golang.org/x/text", "v0.3.0", versions)
    if report is None:
        ...  # excluded
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Collection,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from modkeeper.exceptions import ParseError
from modkeeper.models.report import DependencyReport
from modkeeper.models.version import (
    ClassifiedVersion,
    SeverityTier,
    Version,
    is_incompatible,
)
from modkeeper.core.classifier import IncompatiblePredicate, classify
from modkeeper.utils.logger import get_logger

if TYPE_CHECKING:
    from modkeeper.config import ModKeeperConfig

logger = get_logger("evaluator")

#: Tiers a filter can select; ``INCOMPATIBLE`` is governed separately.
FILTERABLE_TIERS: FrozenSet[SeverityTier] = frozenset(
    {SeverityTier.PATCH, SeverityTier.MINOR, SeverityTier.MAJOR}
)


@dataclass(frozen=True)
class VersionFilter:
    """Decides which classified versions are shown.

    Attributes:
        tiers: Tiers to retain out of patch, minor and major.
        include_incompatible: Whether incompatible-tier versions are retained.
    """

    tiers: FrozenSet[SeverityTier] = FILTERABLE_TIERS
    include_incompatible: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "tiers", frozenset(self.tiers) & FILTERABLE_TIERS)

    @classmethod
    def from_config(cls, config: "ModKeeperConfig") -> "VersionFilter":
        """Build a filter from a :class:`~modkeeper.config.ModKeeperConfig`."""
        return cls(
            tiers=frozenset(config.severity_filter),
            include_incompatible=config.show_incompatible,
        )

    def accepts(self, entry: ClassifiedVersion) -> bool:
        if entry.tier is SeverityTier.INCOMPATIBLE:
            return self.include_incompatible
        return entry.tier in self.tiers

    def apply(
        self, entries: Iterable[ClassifiedVersion]
    ) -> Tuple[ClassifiedVersion, ...]:
        """Keep the entries this filter accepts, preserving order."""
        return tuple(entry for entry in entries if self.accepts(entry))


@dataclass
class EvaluationResult:
    """Outcome of evaluating a batch of declared modules.

    Attributes:
        reports: One report per module whose declared version parsed.
        excluded: Paths of modules skipped because their version did not parse.
    """

    reports: List[DependencyReport] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)

    @property
    def outdated(self) -> List[DependencyReport]:
        return [report for report in self.reports if report.is_outdated]


class DependencyEvaluator:
    """Builds :class:`DependencyReport` objects for declared modules.

    Args:
        version_filter: Filter applied after classification. Defaults to
            patch, minor and major with incompatible versions hidden.
        incompatible: Predicate deciding the incompatible tier, forwarded to
            :func:`~modkeeper.core.classifier.classify`.
    """

    def __init__(
        self,
        version_filter: Optional[VersionFilter] = None,
        *,
        incompatible: IncompatiblePredicate = is_incompatible,
    ) -> None:
        self.version_filter = version_filter or VersionFilter()
        self.incompatible = incompatible

    def evaluate(
        self,
        name: str,
        baseline_raw: str,
        raw_candidates: Optional[Collection[str]] = None,
    ) -> Optional[DependencyReport]:
        """Evaluate a single module.

        Args:
            name: Module path.
            baseline_raw: Declared version string.
            raw_candidates: Published versions; ``None`` or empty means the
                module has nothing newer.

        Returns:
            The report, or ``None`` when ``baseline_raw`` is not a valid
            version and the module is excluded from the run.
        """
        try:
            baseline = Version.parse(baseline_raw)
        except ParseError as exc:
            logger.warning("Skipping %s: %s", name, exc)
            return None

        all_candidates = classify(
            baseline,
            raw_candidates or (),
            incompatible=self.incompatible,
        )
        candidates = self.version_filter.apply(all_candidates)

        logger.debug(
            "%s %s: %d newer version(s), %d after filtering",
            name,
            baseline.original,
            len(all_candidates),
            len(candidates),
        )

        return DependencyReport(
            name=name,
            baseline=baseline,
            candidates=candidates,
            all_candidates=all_candidates,
        )

    def evaluate_all(
        self,
        declared: Sequence[Tuple[str, str]],
        candidates_by_name: Mapping[str, Collection[str]],
    ) -> EvaluationResult:
        """Evaluate every declared ``(name, baseline)`` pair.

        Modules missing from ``candidates_by_name`` are evaluated against an
        empty candidate set. One module's failure never affects another.
        """
        result = EvaluationResult()

        for name, baseline_raw in declared:
            report = self.evaluate(name, baseline_raw, candidates_by_name.get(name))
            if report is None:
                result.excluded.append(name)
            else:
                result.reports.append(report)

        logger.info(
            "Evaluated %d module(s): %d outdated, %d excluded",
            len(declared),
            len(result.outdated),
            len(result.excluded),
        )
        return result
