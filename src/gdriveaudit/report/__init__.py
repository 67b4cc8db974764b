"""Report exports for gdriveaudit."""

from __future__ import annotations

from .exporter import ReportExporter, render_cell
from .progress import ProgressReporter, format_progress
from .views import (
    FULL_LISTING_COLUMNS,
    AggregationEngine,
    Row,
    ViewName,
    record_to_row,
    stale_sheet_title,
)

__all__ = [
    "AggregationEngine",
    "ViewName",
    "Row",
    "record_to_row",
    "FULL_LISTING_COLUMNS",
    "stale_sheet_title",
    "ReportExporter",
    "render_cell",
    "ProgressReporter",
    "format_progress",
]
