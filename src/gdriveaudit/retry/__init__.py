"""Retry exports for gdriveaudit."""

from __future__ import annotations

from .policy import RetryOutcome, RetryPolicy

__all__ = ["RetryOutcome", "RetryPolicy"]
