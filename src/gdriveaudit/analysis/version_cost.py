"""Per-file version history cost metrics."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from gdriveaudit.errors import AnalysisError
from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import (
    AnalysisRecord,
    CandidateFile,
    FileFailure,
    OwnershipInfo,
    VersionEntry,
)
from gdriveaudit.retry import RetryPolicy
from gdriveaudit.util.time import days_between, normalize_dt, now_utc
from gdriveaudit.util.units import BYTES_PER_MB, bytes_to_mb

from .accumulator import RunAccumulator

logger = get_logger(__name__)


class VersionCostAnalyzer:
    """
    Build one AnalysisRecord per file and add it to the run accumulator.

    The history service is any object with:
        list_versions(item_id: str, mime_type: str = "") -> list[VersionEntry]
    """

    def __init__(
        self,
        history: Any,
        accumulator: RunAccumulator,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._history = history
        self._accumulator = accumulator
        self._retry_policy = retry_policy or RetryPolicy()
        self._clock = clock

    def analyze(self, file: CandidateFile, ownership: OwnershipInfo) -> Optional[AnalysisRecord]:
        """
        Returns:
            The record, or None if the file was dropped. Dropped files are
            logged and left out of every counter.
        """
        try:
            versions = self._fetch_versions(file)
            record = build_record(file, ownership, versions, now=self._clock())
        except Exception as exc:
            logger.error(f"Skipping {file.path}: {type(exc).__name__}: {exc}")
            self._accumulator.add_failure(
                FileFailure(
                    path=file.path,
                    stage="analysis",
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
            )
            return None

        self._accumulator.add(record)
        return record

    def _fetch_versions(self, file: CandidateFile) -> list[VersionEntry]:
        outcome = self._retry_policy.execute(
            lambda: list(self._history.list_versions(file.remote_id, mime_type=file.file_type)),
            label=f"versions of {file.path}",
        )
        if outcome.ok:
            return outcome.value or []

        exc = outcome.error
        if isinstance(exc, AnalysisError):
            # Malformed payload: the file is dropped, not degraded.
            raise exc
        logger.warning(
            f"Version history unavailable for {file.path} after {outcome.attempts} "
            f"attempt(s) ({type(exc).__name__}: {exc}); counting current version only"
        )
        self._accumulator.add_failure(
            FileFailure(
                path=file.path,
                stage="versions",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
        )
        return []


def build_record(
    file: CandidateFile,
    ownership: OwnershipInfo,
    versions: Sequence[VersionEntry],
    *,
    now: datetime,
) -> AnalysisRecord:
    """
    Compute the version metrics for one file.

    Raises:
        AnalysisError: on negative sizes or naive/missing timestamps.
    """
    if file.size < 0:
        raise AnalysisError("Negative current size", details={"path": file.path})

    created = _aware(file.created, "created", file.path)
    last_modified = _aware(file.last_modified, "last_modified", file.path)
    last_accessed = _aware(ownership.last_accessed_date, "last_accessed_date", file.path)

    sizes = [file.size]
    oldest = created
    for v in versions:
        if v.size < 0:
            raise AnalysisError("Negative version size", details={"path": file.path})
        sizes.append(v.size)
        oldest = min(oldest, _aware(v.created, "version.created", file.path))

    version_count = len(sizes)
    total_size = sum(sizes)
    overhead = total_size - file.size

    if file.size == 0:
        overhead_percent = 0.0
    else:
        overhead_percent = round(100.0 * overhead / file.size, 1)

    return AnalysisRecord(
        file=file,
        ownership=ownership,
        version_count=version_count,
        total_size=total_size,
        overhead_bytes=overhead,
        overhead_percent=overhead_percent,
        oldest_version_date=oldest,
        version_span_days=days_between(oldest, last_modified),
        days_since_last_accessed=days_between(last_accessed, now),
        average_version_mb=round(total_size / BYTES_PER_MB / version_count, 2),
        largest_version_mb=bytes_to_mb(max(sizes)),
        smallest_version_mb=bytes_to_mb(min(sizes)),
    )


def _aware(value: Any, field_name: str, path: str) -> datetime:
    try:
        return normalize_dt(value)
    except (TypeError, ValueError) as exc:
        raise AnalysisError(
            f"Malformed timestamp in {field_name}",
            details={"path": path, "field": field_name},
            cause=exc,
        ) from exc
