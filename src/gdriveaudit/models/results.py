"""Result models for an audit run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from .record import AnalysisRecord, RunStats

AuditStatus = Literal["success", "empty", "cancelled"]
FailureStage = Literal["versions", "analysis"]


@dataclass(slots=True)
class FileFailure:
    """A file whose analysis was degraded (versions) or dropped (analysis)."""

    path: str
    stage: FailureStage
    error_type: str
    error_message: str


@dataclass(slots=True)
class AuditResult:
    """Aggregate result for VersionAuditor.run()."""

    status: AuditStatus
    candidates_found: int
    stats: RunStats
    records: list[AnalysisRecord]

    views: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    artifacts: dict[str, Path] = field(default_factory=dict)
    failures: list[FileFailure] = field(default_factory=list)
    export_errors: dict[str, str] = field(default_factory=dict)
