"""Public error exports for gdriveaudit."""

from __future__ import annotations

from .exceptions import (
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
    is_retryable,
    map_http_error,
)

__all__ = [
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
    "is_retryable",
]
