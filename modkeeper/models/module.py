"""
Go module manifest data model for modkeeper.

This module defines the structured representation of a ``go.mod`` file and
of the individual ``require`` entries it declares.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ModuleRequirement:
    """
    Represents a single ``require`` entry from a ``go.mod`` file.

    Attributes:
        path: Module path (e.g. ``github.com/spf13/cobra``).
        version: Declared version string, verbatim.
        indirect: Whether the entry carries an ``// indirect`` comment.
        line_number: Original line number in the source file.
        raw_line: Original unmodified line text.
    """

    path: str
    version: str
    indirect: bool = False
    line_number: int = 0
    raw_line: Optional[str] = None

    def to_string(self) -> str:
        """Render the entry the way it appears inside a ``require`` block."""
        text = f"{self.path} {self.version}"
        if self.indirect:
            text += " // indirect"
        return text

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class GoModFile:
    """
    A parsed ``go.mod`` manifest.

    Attributes:
        module: Module path declared by the ``module`` directive.
        go_version: Language version from the ``go`` directive.
        requirements: Every ``require`` entry, direct and indirect, in file order.
        source_path: File the manifest was read from, if any.
    """

    module: Optional[str] = None
    go_version: Optional[str] = None
    requirements: List[ModuleRequirement] = field(default_factory=list)
    source_path: Optional[str] = None

    @property
    def direct_requirements(self) -> List[ModuleRequirement]:
        """Requirements not marked ``// indirect``."""
        return [req for req in self.requirements if not req.indirect]

    @property
    def indirect_requirements(self) -> List[ModuleRequirement]:
        return [req for req in self.requirements if req.indirect]
