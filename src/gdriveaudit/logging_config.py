"""
Logging configuration for gdriveaudit.

Console output goes to stderr; the run log is a sequential text file with
one timestamped, level-tagged line per event.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

CONSOLE_FORMAT: str = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)
FILE_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss} [{level}] {message}"


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str | Path] = None,
    *,
    console: bool = True,
) -> list[int]:
    """
    Replace loguru's default sink with the gdriveaudit sinks.

    Args:
        level: Minimum level (DEBUG, INFO, SUCCESS, WARNING, ERROR).
        log_file: Run log path; parent directories are created.
        console: Whether to log to stderr.

    Returns:
        Sink ids, usable with logger.remove().
    """
    logger.remove()
    sink_ids: list[int] = []

    if console:
        sink_ids.append(
            logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)
        )

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        sink_ids.append(
            logger.add(
                str(path),
                format=FILE_FORMAT,
                level=level,
                encoding="utf-8",
                enqueue=True,
            )
        )

    return sink_ids


def get_logger(name: str) -> Any:
    """Logger bound to a component name (usually __name__)."""
    return logger.bind(component=name)
