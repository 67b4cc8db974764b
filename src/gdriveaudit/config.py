"""Run configuration for gdriveaudit."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from gdriveaudit.util.units import mb_to_bytes

ENV_PREFIX: str = "GDRIVEAUDIT_"


def normalize_extensions(values: Iterable[str]) -> frozenset[str]:
    """Lowercase, strip dots/whitespace, drop empties."""
    out: set[str] = set()
    for value in values:
        ext = value.strip().lstrip(".").lower()
        if ext:
            out.add(ext)
    return frozenset(out)


@dataclass(frozen=True, slots=True)
class AuditConfig:
    """
    Configuration surface of one audit run.

    Defaults:
        min_size_mb=1, max_files=5000, page_size=500, extensions=all,
        retry_attempts=0 (single attempt, no retries).

    With retry_attempts=3 a failing file costs up to 5+10+20 seconds of
    backoff, plus 30 seconds per rate-limited attempt.
    """

    min_size_mb: float = 1.0
    max_files: int = 5000
    page_size: int = 500
    extensions: frozenset[str] = field(default_factory=frozenset)
    retry_attempts: int = 0

    page_delay_sec: float = 0.5
    max_workers: int = 1
    stale_after_days: float = 90
    top_overhead_limit: int = 50
    output_dir: str = "reports"
    report_stem: Optional[str] = None

    def __post_init__(self) -> None:
        if self.min_size_mb < 0:
            raise ValueError("min_size_mb must be >= 0")
        if self.max_files < 1:
            raise ValueError("max_files must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if self.retry_attempts < 0:
            raise ValueError("retry_attempts must be >= 0")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.top_overhead_limit < 1:
            raise ValueError("top_overhead_limit must be >= 1")
        if not isinstance(self.output_dir, str) or not self.output_dir.strip():
            raise ValueError("output_dir must be a non-empty string")

        # frozen: assign through object.__setattr__
        object.__setattr__(self, "extensions", normalize_extensions(self.extensions))

    @property
    def min_size_bytes(self) -> int:
        return mb_to_bytes(self.min_size_mb)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuditConfig":
        """
        Build from GDRIVEAUDIT_* variables; unset variables keep defaults.

        Recognized: MIN_SIZE_MB, MAX_FILES, PAGE_SIZE, EXTENSIONS
        (comma-separated), RETRY_ATTEMPTS, PAGE_DELAY_SEC, MAX_WORKERS,
        STALE_AFTER_DAYS, OUTPUT_DIR.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        def _get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name, "").strip()
            return value or None

        for name, key, conv in (
            ("MIN_SIZE_MB", "min_size_mb", float),
            ("MAX_FILES", "max_files", int),
            ("PAGE_SIZE", "page_size", int),
            ("RETRY_ATTEMPTS", "retry_attempts", int),
            ("PAGE_DELAY_SEC", "page_delay_sec", float),
            ("MAX_WORKERS", "max_workers", int),
            ("STALE_AFTER_DAYS", "stale_after_days", float),
        ):
            raw = _get(name)
            if raw is None:
                continue
            try:
                kwargs[key] = conv(raw)
            except ValueError as exc:
                raise ValueError(f"{ENV_PREFIX}{name} is not a valid number: {raw!r}") from exc

        raw_ext = _get("EXTENSIONS")
        if raw_ext is not None:
            kwargs["extensions"] = normalize_extensions(raw_ext.split(","))

        raw_out = _get("OUTPUT_DIR")
        if raw_out is not None:
            kwargs["output_dir"] = raw_out

        return cls(**kwargs)  # type: ignore[arg-type]
