"""Exception hierarchy and HTTP error mapping for gdriveaudit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveAuditError(Exception):
    """
    Base exception for gdriveaudit.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class AuthError(GDriveAuditError):
    """Raised when OAuth / service account authentication fails."""


class PermissionError(GDriveAuditError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GDriveAuditError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class NotFoundError(GDriveAuditError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class RateLimitError(GDriveAuditError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GDriveAuditError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GDriveAuditError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GDriveAuditError):
    """Raised for unclassified API errors (5xx, unknown 4xx, malformed payloads)."""


class DiscoveryError(GDriveAuditError):
    """Raised when the search phase fails. Aborts the run."""


class AnalysisError(GDriveAuditError):
    """Raised when a single file cannot be turned into an analysis record."""


class RetryExhaustedError(GDriveAuditError):
    """Raised by RetryOutcome.unwrap() when every attempt failed."""


class ExportError(GDriveAuditError):
    """Raised when a report artifact cannot be written."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdriveaudit exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)

_RATE_REASON_KEYWORDS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "throttled",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def _is_rate_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _RATE_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveAuditError:
    """
    Map an HTTP error to a gdriveaudit exception.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), but QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)


def is_rate_limited(exc: BaseException) -> bool:
    """
    Return True if the error signals throttling by the remote service.

    Daily/storage quota errors are not throttling: waiting does not help.
    """
    if isinstance(exc, RateLimitError):
        return True
    if isinstance(exc, GDriveAuditError):
        if exc.details.get("status_code") == 429:
            return True
        return _is_rate_reason(exc.details.get("reason"))
    return False


def is_retryable(exc: BaseException) -> bool:
    """Return False for failures another attempt cannot fix (malformed payloads, bad arguments)."""
    return not isinstance(exc, (AnalysisError, InvalidArgumentError))
