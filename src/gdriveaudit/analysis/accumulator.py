"""Run-scoped accumulator of analysis records."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional

from gdriveaudit.models import AnalysisRecord, FileFailure, RunStats
from gdriveaudit.util.time import now_utc


class RunAccumulator:
    """
    Mutable state of one audit run.

    add() is the only way records and counters change; it holds the lock for
    the whole update so a snapshot never sees a half-counted record.
    """

    def __init__(self, started_at: Optional[datetime] = None) -> None:
        self._lock = threading.Lock()
        self._started_at = started_at or now_utc()
        self._files_analyzed = 0
        self._files_with_versions = 0
        self._total_current_size = 0
        self._total_version_size = 0
        self._records: list[AnalysisRecord] = []
        self._failures: list[FileFailure] = []

    def add(self, record: AnalysisRecord) -> None:
        with self._lock:
            self._files_analyzed += 1
            if record.has_versions:
                self._files_with_versions += 1
            self._total_current_size += record.current_size
            self._total_version_size += record.total_size
            self._records.append(record)

    def add_failure(self, failure: FileFailure) -> None:
        with self._lock:
            self._failures.append(failure)

    def snapshot(self) -> RunStats:
        with self._lock:
            return RunStats(
                files_analyzed=self._files_analyzed,
                files_with_versions=self._files_with_versions,
                total_current_size=self._total_current_size,
                total_version_size=self._total_version_size,
                started_at=self._started_at,
            )

    def records(self) -> list[AnalysisRecord]:
        with self._lock:
            return list(self._records)

    def failures(self) -> list[FileFailure]:
        with self._lock:
            return list(self._failures)
