"""
Core functionality exports for modkeeper.

    from modkeeper.core import classify, DependencyEvaluator, rank
"""

from __future__ import annotations

from modkeeper.core.classifier import classify, severity_of
from modkeeper.core.evaluator import (
    DependencyEvaluator,
    EvaluationResult,
    VersionFilter,
)
from modkeeper.core.ranker import rank
from modkeeper.core.parser import GoModParser
from modkeeper.core.version_source import (
    FetchResult,
    ModuleProxySource,
    escape_module_path,
    resolve_proxy_url,
)

__all__ = [
    "classify",
    "severity_of",
    "DependencyEvaluator",
    "EvaluationResult",
    "VersionFilter",
    "rank",
    "GoModParser",
    "ModuleProxySource",
    "FetchResult",
    "escape_module_path",
    "resolve_proxy_url",
]
