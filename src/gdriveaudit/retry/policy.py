"""Bounded exponential-backoff executor for remote calls."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from gdriveaudit.errors import RetryExhaustedError, is_rate_limited, is_retryable
from gdriveaudit.logging_config import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Success value or terminal failure of RetryPolicy.execute()."""

    ok: bool
    attempts: int
    label: str = ""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    def unwrap(self) -> T:
        if self.ok:
            return self.value  # type: ignore[return-value]
        raise RetryExhaustedError(
            f"{self.label or 'operation'} failed after {self.attempts} attempt(s)",
            details={"label": self.label, "attempts": self.attempts},
            cause=self.error,
        ) from self.error


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry an operation with exponential backoff.

    Schedule:
        - a rate-limited failure first waits rate_limit_cooldown_sec;
        - then, while attempt < max_attempts, waits base_delay_sec * 2**attempt
          (5, 10, 20, ...) and tries again.

    max_attempts counts retries: 0 means a single attempt, k means at most k+1.
    Errors rejected by is_retryable fail on the first attempt.
    """

    max_attempts: int = 0
    base_delay_sec: float = 5.0
    rate_limit_cooldown_sec: float = 30.0
    is_rate_limited: Callable[[BaseException], bool] = is_rate_limited
    is_retryable: Callable[[BaseException], bool] = is_retryable
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.base_delay_sec < 0 or self.rate_limit_cooldown_sec < 0:
            raise ValueError("delays must be >= 0")

    def backoff_delay(self, attempt: int) -> float:
        return self.base_delay_sec * (2**attempt)

    def execute(self, operation: Callable[[], T], *, label: str = "") -> RetryOutcome[T]:
        attempt = 0
        while True:
            try:
                value = operation()
            except Exception as exc:
                if not self.is_retryable(exc):
                    return RetryOutcome(ok=False, attempts=attempt + 1, label=label, error=exc)

                if self.is_rate_limited(exc):
                    logger.warning(
                        f"Rate limited on {label or 'operation'}; "
                        f"cooling down {self.rate_limit_cooldown_sec:.0f}s"
                    )
                    self.sleep(self.rate_limit_cooldown_sec)

                if attempt < self.max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        f"{label or 'operation'} failed ({type(exc).__name__}: {exc}); "
                        f"retry {attempt + 1}/{self.max_attempts} in {delay:.0f}s"
                    )
                    self.sleep(delay)
                    attempt += 1
                    continue

                return RetryOutcome(ok=False, attempts=attempt + 1, label=label, error=exc)

            return RetryOutcome(ok=True, attempts=attempt + 1, label=label, value=value)
