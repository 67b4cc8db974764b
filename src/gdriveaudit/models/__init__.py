"""Public model exports for gdriveaudit."""

from __future__ import annotations

from .candidate import CandidateFile
from .metadata import UNKNOWN, Identity, MetadataRecord, OwnershipInfo, VersionEntry
from .record import AnalysisRecord, RunStats
from .results import AuditResult, AuditStatus, FileFailure, FailureStage

__all__ = [
    "UNKNOWN",
    "CandidateFile",
    "Identity",
    "MetadataRecord",
    "OwnershipInfo",
    "VersionEntry",
    "AnalysisRecord",
    "RunStats",
    "AuditStatus",
    "FailureStage",
    "FileFailure",
    "AuditResult",
]
