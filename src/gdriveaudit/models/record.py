"""Analysis output records and run statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .candidate import CandidateFile
from .metadata import OwnershipInfo


@dataclass(frozen=True, slots=True)
class AnalysisRecord:
    """
    One analyzed file: the candidate, its ownership and the version metrics.

    Invariants:
        - version_count == 1 + number of historical versions
        - total_size >= file.size, overhead_bytes == total_size - file.size
    """

    file: CandidateFile
    ownership: OwnershipInfo

    version_count: int
    total_size: int
    overhead_bytes: int
    overhead_percent: float
    oldest_version_date: datetime
    version_span_days: float
    days_since_last_accessed: float
    average_version_mb: float
    largest_version_mb: float
    smallest_version_mb: float

    @property
    def path(self) -> str:
        return self.file.path

    @property
    def name(self) -> str:
        return self.file.name

    @property
    def extension(self) -> str:
        return self.file.extension

    @property
    def current_size(self) -> int:
        return self.file.size

    @property
    def owner(self) -> str:
        return self.ownership.owner

    @property
    def owner_email(self) -> Optional[str]:
        return self.ownership.owner_email

    @property
    def has_versions(self) -> bool:
        return self.version_count > 1


@dataclass(frozen=True, slots=True)
class RunStats:
    """Consistent snapshot of the run counters."""

    files_analyzed: int
    files_with_versions: int
    total_current_size: int
    total_version_size: int
    started_at: datetime

    @property
    def files_without_versions(self) -> int:
        return self.files_analyzed - self.files_with_versions

    @property
    def overhead_bytes(self) -> int:
        return self.total_version_size - self.total_current_size
