"""gdriveaudit public API."""

from __future__ import annotations

from gdriveaudit.analysis import FileEnricher, RunAccumulator, VersionCostAnalyzer
from gdriveaudit.auditor import VersionAuditor
from gdriveaudit.auth import AuthInfo, OAuthClient
from gdriveaudit.config import AuditConfig
from gdriveaudit.controller import DriveIndexController
from gdriveaudit.discovery import FileDiscovery, SearchQuery
from gdriveaudit.errors import (
    AnalysisError,
    ApiError,
    AuthError,
    DiscoveryError,
    ExportError,
    GDriveAuditError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RetryExhaustedError,
    is_rate_limited,
    map_http_error,
)
from gdriveaudit.logging_config import configure_logging
from gdriveaudit.models import (
    AnalysisRecord,
    AuditResult,
    CandidateFile,
    FileFailure,
    Identity,
    MetadataRecord,
    OwnershipInfo,
    RunStats,
    VersionEntry,
)
from gdriveaudit.report import AggregationEngine, ProgressReporter, ReportExporter, ViewName
from gdriveaudit.retry import RetryOutcome, RetryPolicy

__all__ = [
    # High-level
    "VersionAuditor",
    "AuditConfig",
    "configure_logging",
    # Auth / backend
    "AuthInfo",
    "OAuthClient",
    "DriveIndexController",
    # Pipeline
    "RetryPolicy",
    "RetryOutcome",
    "SearchQuery",
    "FileDiscovery",
    "FileEnricher",
    "VersionCostAnalyzer",
    "RunAccumulator",
    "AggregationEngine",
    "ViewName",
    "ReportExporter",
    "ProgressReporter",
    # Models
    "CandidateFile",
    "Identity",
    "MetadataRecord",
    "OwnershipInfo",
    "VersionEntry",
    "AnalysisRecord",
    "RunStats",
    "FileFailure",
    "AuditResult",
    # Errors
    "GDriveAuditError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "DiscoveryError",
    "AnalysisError",
    "RetryExhaustedError",
    "ExportError",
    "HttpErrorInfo",
    "map_http_error",
    "is_rate_limited",
]
