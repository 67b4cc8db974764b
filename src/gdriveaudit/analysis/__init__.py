"""Analysis exports for gdriveaudit."""

from __future__ import annotations

from .accumulator import RunAccumulator
from .enricher import FileEnricher, resolve_ownership
from .version_cost import VersionCostAnalyzer, build_record

__all__ = [
    "RunAccumulator",
    "FileEnricher",
    "resolve_ownership",
    "VersionCostAnalyzer",
    "build_record",
]
