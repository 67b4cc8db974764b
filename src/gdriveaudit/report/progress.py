"""Textual progress reporting."""

from __future__ import annotations

from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import RunStats
from gdriveaudit.util.time import format_duration
from gdriveaudit.util.units import bytes_to_gb

logger = get_logger(__name__)


class ProgressReporter:
    """Render one status line per processed file. Holds no run state."""

    def __init__(self, *, log: bool = True) -> None:
        self._log = log

    def report(
        self,
        current: int,
        total: int,
        file_name: str,
        stats: RunStats,
        elapsed_sec: float,
    ) -> str:
        line = format_progress(current, total, file_name, stats, elapsed_sec)
        if self._log:
            logger.info(line)
        return line


def format_progress(
    current: int,
    total: int,
    file_name: str,
    stats: RunStats,
    elapsed_sec: float,
) -> str:
    percent = round(100.0 * current / total, 1) if total > 0 else 0.0
    parts = [
        f"[{current}/{total}] {percent}%",
        file_name,
        f"current {bytes_to_gb(stats.total_current_size)} GB",
        f"all versions {bytes_to_gb(stats.total_version_size)} GB",
        f"elapsed {format_duration(elapsed_sec)}",
    ]
    if current > 0:
        eta = elapsed_sec * (total - current) / current
        parts.append(f"ETA {format_duration(eta)}")
    return " | ".join(parts)
