"""Aggregation of analysis records into report views."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from gdriveaudit.models import AnalysisRecord, RunStats
from gdriveaudit.util.units import bytes_to_gb, bytes_to_mb

Row = dict[str, Any]


class ViewName(str, Enum):
    """Report views; values are the default workbook sheet titles."""

    FULL_LISTING = "File Analysis"
    SUMMARY = "Summary"
    TOP_OVERHEAD = "Top Version Overhead"
    BY_OWNER = "By Owner"
    STALE_FILES = "Stale Files (90+ days)"
    BY_FILE_TYPE = "By File Type"


NO_EXTENSION: str = "(none)"


def stale_sheet_title(stale_after_days: float) -> str:
    return f"Stale Files ({stale_after_days:g}+ days)"


# Full-listing columns in order; one entry per AnalysisRecord field.
_ROW_FIELDS: tuple[tuple[str, Callable[[AnalysisRecord], Any]], ...] = (
    ("File Name", lambda r: r.file.name),
    ("Path", lambda r: r.file.path),
    ("Extension", lambda r: r.file.extension),
    ("URL", lambda r: r.file.url),
    ("Owner", lambda r: r.ownership.owner),
    ("Owner Email", lambda r: r.ownership.owner_email),
    ("Last Accessed By", lambda r: r.ownership.last_accessed_by),
    ("Last Accessed Date", lambda r: r.ownership.last_accessed_date),
    ("Days Since Last Accessed", lambda r: r.days_since_last_accessed),
    ("Current Size (MB)", lambda r: bytes_to_mb(r.file.size)),
    ("Current Size (Bytes)", lambda r: r.file.size),
    ("Version Count", lambda r: r.version_count),
    ("Total Size All Versions (MB)", lambda r: bytes_to_mb(r.total_size)),
    ("Total Size All Versions (Bytes)", lambda r: r.total_size),
    ("Version Overhead (MB)", lambda r: bytes_to_mb(r.overhead_bytes)),
    ("Version Overhead (Bytes)", lambda r: r.overhead_bytes),
    ("Overhead %", lambda r: r.overhead_percent),
    ("Average Version Size (MB)", lambda r: r.average_version_mb),
    ("Largest Version (MB)", lambda r: r.largest_version_mb),
    ("Smallest Version (MB)", lambda r: r.smallest_version_mb),
    ("Oldest Version Date", lambda r: r.oldest_version_date),
    ("Version Span (Days)", lambda r: r.version_span_days),
    ("Created", lambda r: r.file.created),
    ("Last Modified", lambda r: r.file.last_modified),
    ("Author", lambda r: r.file.author),
    ("Created By", lambda r: r.file.created_by),
    ("Modified By", lambda r: r.file.modified_by),
    ("Views (Lifetime)", lambda r: r.file.views_lifetime),
    ("Views (Recent)", lambda r: r.file.views_recent),
    ("Last Viewed", lambda r: r.file.last_viewed),
    ("Checked Out To", lambda r: r.file.checkout_user),
)

FULL_LISTING_COLUMNS: tuple[str, ...] = tuple(column for column, _ in _ROW_FIELDS)


def record_to_row(record: AnalysisRecord) -> Row:
    """Flat row with every AnalysisRecord field (raw values, unrendered)."""
    return {column: getter(record) for column, getter in _ROW_FIELDS}


class AggregationEngine:
    """
    Derive the report views from a complete record set.

    Every view is a pure function of (records, stats). Records are put in
    discovery order first; all sorts are stable, so equal keys keep that order.
    """

    def __init__(self, *, stale_after_days: float = 90, top_overhead_limit: int = 50) -> None:
        self.stale_after_days = stale_after_days
        self.top_overhead_limit = top_overhead_limit

    def build_views(
        self,
        records: Iterable[AnalysisRecord],
        stats: RunStats,
    ) -> dict[ViewName, list[Row]]:
        ordered = sorted(records, key=lambda r: r.file.rank)
        return {
            ViewName.FULL_LISTING: self.full_listing(ordered),
            ViewName.SUMMARY: self.summary(stats),
            ViewName.TOP_OVERHEAD: self.top_overhead(ordered),
            ViewName.BY_OWNER: self.by_owner(ordered),
            ViewName.STALE_FILES: self.stale_files(ordered),
            ViewName.BY_FILE_TYPE: self.by_file_type(ordered),
        }

    def full_listing(self, records: Sequence[AnalysisRecord]) -> list[Row]:
        ranked = sorted(records, key=lambda r: r.total_size, reverse=True)
        return [record_to_row(r) for r in ranked]

    def summary(self, stats: RunStats) -> list[Row]:
        if stats.total_current_size == 0:
            overhead_pct = 0.0
        else:
            overhead_pct = round(100.0 * stats.overhead_bytes / stats.total_current_size, 1)

        metrics: list[tuple[str, Any]] = [
            ("Total Files Analyzed", stats.files_analyzed),
            ("Files With Version History", stats.files_with_versions),
            ("Files Without Version History", stats.files_without_versions),
            ("Total Current Size (GB)", bytes_to_gb(stats.total_current_size)),
            ("Total Size All Versions (GB)", bytes_to_gb(stats.total_version_size)),
            ("Total Version Overhead (GB)", bytes_to_gb(stats.overhead_bytes)),
            ("Version Overhead %", overhead_pct),
        ]
        return [{"Metric": name, "Value": value} for name, value in metrics]

    def top_overhead(self, records: Sequence[AnalysisRecord]) -> list[Row]:
        with_overhead = [r for r in records if r.overhead_bytes > 0]
        with_overhead.sort(key=lambda r: r.overhead_bytes, reverse=True)
        return [record_to_row(r) for r in with_overhead[: self.top_overhead_limit]]

    def by_owner(self, records: Sequence[AnalysisRecord]) -> list[Row]:
        rows: list[Row] = []
        for owner, members in _ranked_groups(records, lambda r: r.owner):
            email = next((m.owner_email for m in members if m.owner_email), None)
            rows.append({"Owner": owner, "Owner Email": email, **_group_totals(members)})
        return rows

    def stale_files(self, records: Sequence[AnalysisRecord]) -> list[Row]:
        stale = [r for r in records if r.days_since_last_accessed > self.stale_after_days]
        stale.sort(key=lambda r: r.days_since_last_accessed, reverse=True)
        return [
            {
                "File Name": r.name,
                "Owner": r.owner,
                "Last Accessed By": r.ownership.last_accessed_by,
                "Last Accessed Date": r.ownership.last_accessed_date,
                "Days Since Last Accessed": r.days_since_last_accessed,
                "Current Size (MB)": bytes_to_mb(r.current_size),
                "Total Size All Versions (MB)": bytes_to_mb(r.total_size),
                "Version Overhead (MB)": bytes_to_mb(r.overhead_bytes),
            }
            for r in stale
        ]

    def by_file_type(self, records: Sequence[AnalysisRecord]) -> list[Row]:
        rows: list[Row] = []
        for ext, members in _ranked_groups(records, lambda r: r.extension or NO_EXTENSION):
            row: Row = {"Extension": ext, **_group_totals(members)}
            row["Distinct Owners"] = len({m.owner for m in members})
            rows.append(row)
        return rows


def _ranked_groups(
    records: Sequence[AnalysisRecord],
    key: Callable[[AnalysisRecord], str],
) -> list[tuple[str, list[AnalysisRecord]]]:
    """Group by key (first-appearance order), then by summed total size desc."""
    groups: dict[str, list[AnalysisRecord]] = {}
    for r in records:
        groups.setdefault(key(r), []).append(r)
    ranked = list(groups.items())
    ranked.sort(key=lambda item: sum(r.total_size for r in item[1]), reverse=True)
    return ranked


def _group_totals(members: Sequence[AnalysisRecord]) -> Row:
    count = len(members)
    return {
        "File Count": count,
        "Current Size (MB)": bytes_to_mb(sum(m.current_size for m in members)),
        "Total Size All Versions (MB)": bytes_to_mb(sum(m.total_size for m in members)),
        "Avg Version Count": round(sum(m.version_count for m in members) / count, 1),
        "Version Overhead (MB)": bytes_to_mb(sum(m.overhead_bytes for m in members)),
        "Avg Days Since Last Accessed": round(
            sum(m.days_since_last_accessed for m in members) / count, 1
        ),
    }
