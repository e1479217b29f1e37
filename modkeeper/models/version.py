"""
Version data model for modkeeper.

This module defines the comparable semantic version used for both the
declared (baseline) version of a module and every candidate release listed
by the proxy, together with the severity tiers assigned to upgrades.

Version strings follow Semantic Versioning 2.0.0 with Go's optional leading
``v``::

    v1.2.3
    1.2.3-rc.1
    v2.0.0+incompatible
    v0.0.0-20230101120000-abcdef123456
"""

from __future__ import annotations

import enum
from functools import total_ordering
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

import semver

from modkeeper.exceptions import ParseError
from modkeeper.constants import INCOMPATIBLE_BUILD_TAG

VersionKey = Tuple[int, int, int, Optional[str]]


class Ordering(enum.IntEnum):
    """Result of comparing two versions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


class SeverityTier(enum.IntEnum):
    """How disruptive an upgrade to a candidate version is expected to be.

    Members are ordered by disruptiveness, so the worst tier of a set of
    candidates is simply ``max(tiers)``.
    """

    PATCH = 1
    MINOR = 2
    MAJOR = 3
    INCOMPATIBLE = 4

    @property
    def label(self) -> str:
        """Lower-case display name (``"patch"``, ``"minor"``, ...)."""
        return self.name.lower()

    @property
    def color(self) -> str:
        """Rich color used when rendering versions of this tier."""
        return _TIER_COLORS[self]

    @classmethod
    def from_label(cls, label: str) -> "SeverityTier":
        """Look up a tier by its case-insensitive label.

        Raises:
            ValueError: ``label`` does not name a tier.
        """
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity tier: {label!r}") from None


_TIER_COLORS = {
    SeverityTier.PATCH: "green",
    SeverityTier.MINOR: "yellow",
    SeverityTier.MAJOR: "red",
    SeverityTier.INCOMPATIBLE: "magenta",
}


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    A parsed semantic version.

    Equality, ordering and hashing follow semantic-versioning precedence:
    ``(major, minor, patch, prerelease)``. The leading ``v`` and build
    metadata never affect ordering, so ``Version.parse("v1.2.3")`` equals
    ``Version.parse("1.2.3+build.5")``.

    Attributes:
        original: The verbatim input string.
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Pre-release identifiers (after ``-``), if any.
        build: Build metadata (after ``+``), if any.
    """

    original: str
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None

    _semver: semver.Version = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_semver",
            semver.Version(self.major, self.minor, self.patch, self.prerelease),
        )

    @classmethod
    def parse(cls, raw: str) -> "Version":
        """
        Parse a version string.

        Args:
            raw: Version string, optionally prefixed with ``v``.

        Returns:
            The parsed :class:`Version`.

        Raises:
            ParseError: ``raw`` is not a valid semantic version.

        Examples:
            >>> Version.parse("v1.4.0-rc.1").prerelease
            'rc.1'
        """
        if not isinstance(raw, str):
            raise ParseError(f"Version must be a string, got {type(raw).__name__}")

        text = raw[1:] if raw.startswith("v") else raw
        try:
            parsed = semver.Version.parse(text)
        except (ValueError, TypeError) as exc:
            raise ParseError(f"Invalid version string: {raw!r}", value=raw) from exc

        return cls(
            original=raw,
            major=parsed.major,
            minor=parsed.minor,
            patch=parsed.patch,
            prerelease=parsed.prerelease,
            build=parsed.build,
        )

    @property
    def key(self) -> VersionKey:
        """Identity used for equality, hashing and deduplication."""
        return (self.major, self.minor, self.patch, self.prerelease)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def incompatible(self) -> bool:
        """Whether the build metadata carries Go's ``+incompatible`` marker.

        Go publishes v2+ releases of modules that never adopted a ``/vN``
        module path suffix with this marker.
        """
        if not self.build:
            return False
        return INCOMPATIBLE_BUILD_TAG in self.build.split(".")

    def compare(self, other: "Version") -> Ordering:
        """Compare against ``other`` by semantic-versioning precedence."""
        return Ordering(self._semver.compare(other._semver))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) is Ordering.LESS

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.original


def compare(a: Version, b: Version) -> Ordering:
    """Return the precedence of ``a`` relative to ``b``."""
    return a.compare(b)


def is_incompatible(candidate: Version, baseline: Version) -> bool:
    """Decide whether ``candidate`` crosses an incompatible major boundary.

    Under Go's module-path versioning, a module on major epoch 1 can only
    reach v2+ releases through a new ``/vN`` path; releases listed on the
    old path with ``+incompatible`` are a breaking boundary the toolchain
    does not consider a normal upgrade.

    Args:
        candidate: Newer version being classified.
        baseline: Version currently declared.

    Returns:
        ``True`` when the candidate carries the incompatible marker and sits
        on a different major epoch than the baseline.
    """
    return candidate.incompatible and candidate.major != baseline.major


@dataclass(frozen=True)
class ClassifiedVersion:
    """A candidate version tagged with its upgrade severity."""

    version: Version
    tier: SeverityTier

    def as_pair(self) -> Tuple[str, SeverityTier]:
        """Return ``(original version string, tier)`` for presentation."""
        return self.version.original, self.tier

    def __str__(self) -> str:
        return f"{self.version.original} ({self.tier.label})"
