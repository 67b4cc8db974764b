"""CSV and Excel writers for report views."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from gdriveaudit.errors import ExportError
from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import UNKNOWN
from gdriveaudit.util.time import format_timestamp

from .views import FULL_LISTING_COLUMNS, Row, ViewName, stale_sheet_title

logger = get_logger(__name__)

# Views omitted from the workbook when they have no rows.
OPTIONAL_SHEETS: frozenset[ViewName] = frozenset({ViewName.TOP_OVERHEAD, ViewName.STALE_FILES})

SHEET_ORDER: tuple[ViewName, ...] = (
    ViewName.FULL_LISTING,
    ViewName.SUMMARY,
    ViewName.TOP_OVERHEAD,
    ViewName.BY_OWNER,
    ViewName.STALE_FILES,
    ViewName.BY_FILE_TYPE,
)

# Columns whose missing value renders as a sentinel instead of an empty cell.
DEFAULT_SENTINELS: Mapping[str, str] = {"Owner Email": UNKNOWN}

MAX_COLUMN_WIDTH: int = 50
MAX_SHEET_TITLE: int = 31  # Excel sheet name limit


def render_cell(column: str, value: Any, sentinels: Mapping[str, str] = DEFAULT_SENTINELS) -> Any:
    if value is None:
        return sentinels.get(column, "")
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


class ReportExporter:
    """Write row sets to a CSV file or a multi-sheet workbook under output_dir."""

    def __init__(
        self,
        output_dir: str | Path,
        *,
        sentinels: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._output_dir = Path(output_dir)
        self._sentinels = dict(DEFAULT_SENTINELS if sentinels is None else sentinels)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def write_csv(
        self,
        rows: Sequence[Row],
        name: str,
        *,
        columns: Optional[Sequence[str]] = None,
    ) -> Path:
        """Header comes from the first row, else from columns; with neither the file is empty."""
        path = self._target(name, ".csv")
        fieldnames = list(rows[0].keys()) if rows else list(columns or [])
        with open(path, "w", encoding="utf-8", newline="") as f:
            if fieldnames:
                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                for row in rows:
                    writer.writerow(self._render_row(row))
        return path

    def write_workbook(
        self,
        sheets: Sequence[tuple[str, Sequence[Row]]],
        name: str,
        *,
        columns: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> Path:
        """columns maps a sheet title to the header used when that sheet has no rows."""
        path = self._target(name, ".xlsx")
        wb = Workbook()
        default_ws = wb.active
        empty_headers = columns or {}

        for title, rows in sheets:
            ws = wb.create_sheet(title=title[:MAX_SHEET_TITLE])
            header = list(rows[0].keys()) if rows else list(empty_headers.get(title, []))
            if not header:
                continue
            ws.append(header)
            if not rows:
                _autofit_columns(ws)
                continue
            for row in rows:
                rendered = self._render_row(row)
                ws.append([rendered.get(col, "") for col in header])
            _autofit_columns(ws)

        if default_ws is not None and sheets:
            wb.remove(default_ws)
        wb.save(path)
        return path

    def export_views(
        self,
        views: Mapping[ViewName, Sequence[Row]],
        stem: str,
        *,
        stale_after_days: float = 90,
    ) -> tuple[dict[str, Path], dict[str, str]]:
        """
        Write <stem>.csv (full listing) and <stem>.xlsx (all views).
        The stale sheet is titled after stale_after_days; an empty full
        listing still gets its column header.

        Returns:
            (artifacts, errors): artifact name -> path, artifact name -> message.
            A failure of one artifact does not prevent the other.
        """
        artifacts: dict[str, Path] = {}
        errors: dict[str, str] = {}

        try:
            artifacts["csv"] = self.write_csv(
                views.get(ViewName.FULL_LISTING, []), stem, columns=FULL_LISTING_COLUMNS
            )
            logger.success(f"CSV report written: {artifacts['csv']}")
        except Exception as exc:
            err = ExportError("CSV export failed", details={"stem": stem}, cause=exc)
            logger.error(f"{err}: {type(exc).__name__}: {exc}")
            errors["csv"] = str(exc)

        sheets: list[tuple[str, Sequence[Row]]] = []
        for view in SHEET_ORDER:
            rows = views.get(view, [])
            if view in OPTIONAL_SHEETS and not rows:
                continue
            title = view.value
            if view is ViewName.STALE_FILES:
                title = stale_sheet_title(stale_after_days)
            sheets.append((title, rows))

        try:
            artifacts["xlsx"] = self.write_workbook(
                sheets, stem, columns={ViewName.FULL_LISTING.value: FULL_LISTING_COLUMNS}
            )
            logger.success(f"Excel report written: {artifacts['xlsx']}")
        except Exception as exc:
            err = ExportError("Excel export failed", details={"stem": stem}, cause=exc)
            logger.error(f"{err}: {type(exc).__name__}: {exc}")
            errors["xlsx"] = str(exc)

        return artifacts, errors

    def _target(self, name: str, suffix: str) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        return self._output_dir / f"{name}{suffix}"

    def _render_row(self, row: Row) -> Row:
        return {col: render_cell(col, value, self._sentinels) for col, value in row.items()}


def _autofit_columns(ws: Any) -> None:
    for column in ws.columns:
        if column[0].column is None:
            continue
        letter = get_column_letter(column[0].column)
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[letter].width = min(longest + 2, MAX_COLUMN_WIDTH)
