"""VersionAuditor: discovery -> per-file analysis -> views -> export."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from gdriveaudit.analysis import FileEnricher, RunAccumulator, VersionCostAnalyzer
from gdriveaudit.auth import AuthInfo
from gdriveaudit.config import AuditConfig
from gdriveaudit.controller import DriveIndexController
from gdriveaudit.discovery import FileDiscovery
from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import AuditResult, CandidateFile
from gdriveaudit.report import AggregationEngine, ProgressReporter, ReportExporter
from gdriveaudit.retry import RetryPolicy
from gdriveaudit.util.time import now_utc
from gdriveaudit.util.units import bytes_to_gb

logger = get_logger(__name__)


class VersionAuditor:
    """
    High-level runner for one version-cost audit.

    Progress and results go to the loguru sinks already installed; call
    configure_logging(log_file=...) before run() to keep a run log file.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        config: Optional[AuditConfig] = None,
        scopes: Optional[Sequence[str]] = None,
    ) -> None:
        controller = DriveIndexController(auth_info, scopes=scopes)
        self._init_state(
            index=controller,
            lookup=controller,
            history=controller,
            config=config,
            closer=controller.close,
        )

    @classmethod
    def from_services(
        cls,
        index: Any,
        lookup: Any = None,
        history: Any = None,
        *,
        config: Optional[AuditConfig] = None,
        progress: Optional[ProgressReporter] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = now_utc,
    ) -> "VersionAuditor":
        """
        Create an auditor over injected collaborators (useful for tests).

        lookup and history default to index, matching DriveIndexController
        which implements all three.
        """
        obj = cls.__new__(cls)
        closer = getattr(index, "close", None)
        obj._init_state(
            index=index,
            lookup=lookup if lookup is not None else index,
            history=history if history is not None else index,
            config=config,
            closer=closer if callable(closer) else None,
            progress=progress,
            sleep=sleep,
            clock=clock,
        )
        return obj

    def _init_state(
        self,
        *,
        index: Any,
        lookup: Any,
        history: Any,
        config: Optional[AuditConfig],
        closer: Optional[Callable[[], None]],
        progress: Optional[ProgressReporter] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._index = index
        self._lookup = lookup
        self._history = history
        self._config = config or AuditConfig()
        self._closer = closer
        self._progress = progress or ProgressReporter()
        self._sleep = sleep
        self._clock = clock

    @property
    def config(self) -> AuditConfig:
        return self._config

    def run(
        self,
        *,
        cancel_event: Optional[threading.Event] = None,
        export: bool = True,
    ) -> AuditResult:
        """
        Run the whole pipeline once.

        Policy:
            - Discovery failures abort the run (raised after close()).
            - Per-file failures are logged and collected in result.failures.
            - cancel_event is checked before each file; in-flight files finish.
            - Export failures are collected in result.export_errors.
        """
        cfg = self._config
        accumulator = RunAccumulator(started_at=self._clock())
        retry = RetryPolicy(max_attempts=cfg.retry_attempts, sleep=self._sleep)

        try:
            discovery = FileDiscovery(
                self._index,
                retry_policy=retry,
                page_delay_sec=cfg.page_delay_sec,
                sleep=self._sleep,
            )
            candidates = discovery.discover(
                cfg.min_size_bytes,
                cfg.extensions,
                page_size=cfg.page_size,
                top_n=cfg.max_files,
            )

            if not candidates:
                logger.warning("No files matched the search criteria; nothing to analyze")
                return AuditResult(
                    status="empty",
                    candidates_found=0,
                    stats=accumulator.snapshot(),
                    records=[],
                )

            logger.info(
                f"Analyzing {len(candidates)} files with {cfg.max_workers} worker(s), "
                f"retry budget {cfg.retry_attempts}"
            )
            processed = self._process_files(candidates, accumulator, retry, cancel_event)
            cancelled = processed < len(candidates)

            records = sorted(accumulator.records(), key=lambda r: r.file.rank)
            stats = accumulator.snapshot()
            engine = AggregationEngine(
                stale_after_days=cfg.stale_after_days,
                top_overhead_limit=cfg.top_overhead_limit,
            )
            views = engine.build_views(records, stats)

            result = AuditResult(
                status="cancelled" if cancelled else "success",
                candidates_found=len(candidates),
                stats=stats,
                records=records,
                views={view.value: rows for view, rows in views.items()},
                failures=accumulator.failures(),
            )

            if export:
                exporter = ReportExporter(cfg.output_dir)
                result.artifacts, result.export_errors = exporter.export_views(
                    views, self._report_stem(), stale_after_days=cfg.stale_after_days
                )

            self._log_summary(result)
            return result
        except Exception as exc:
            logger.error(f"Audit aborted: {type(exc).__name__}: {exc}")
            raise
        finally:
            self.close()

    def close(self) -> None:
        """Release the remote session. Safe to call more than once."""
        if self._closer is None:
            return
        try:
            self._closer()
        except Exception as exc:
            logger.warning(f"Failed to close remote session: {exc}")

    # ----------------------------
    # Internals
    # ----------------------------
    def _process_files(
        self,
        candidates: list[CandidateFile],
        accumulator: RunAccumulator,
        retry: RetryPolicy,
        cancel_event: Optional[threading.Event],
    ) -> int:
        """Analyze every candidate; returns how many were processed."""
        enricher = FileEnricher(self._lookup)
        analyzer = VersionCostAnalyzer(
            self._history,
            accumulator,
            retry_policy=retry,
            clock=self._clock,
        )
        total = len(candidates)
        started = time.monotonic()

        def _cancelled() -> bool:
            return cancel_event is not None and cancel_event.is_set()

        def _analyze_one(file: CandidateFile) -> bool:
            if _cancelled():
                return False
            ownership = enricher.enrich(file)
            analyzer.analyze(file, ownership)
            return True

        def _report(done: int, file: CandidateFile) -> None:
            self._progress.report(
                done, total, file.name, accumulator.snapshot(), time.monotonic() - started
            )

        done = 0
        if self._config.max_workers <= 1:
            for file in candidates:
                if not _analyze_one(file):
                    break
                done += 1
                _report(done, file)
        else:
            with ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix="gdriveaudit",
            ) as pool:
                futures = {pool.submit(_analyze_one, f): f for f in candidates}
                for future in as_completed(futures):
                    if future.result():
                        done += 1
                        _report(done, futures[future])

        if done < total:
            logger.warning(f"Run cancelled after {done} of {total} files")
        return done

    def _report_stem(self) -> str:
        if self._config.report_stem:
            return self._config.report_stem
        return f"version_audit_{self._clock().strftime('%Y%m%d_%H%M%S')}"

    def _log_summary(self, result: AuditResult) -> None:
        stats = result.stats
        dropped = sum(1 for f in result.failures if f.stage == "analysis")
        logger.success(
            f"Audit {result.status}: {stats.files_analyzed} files analyzed "
            f"({stats.files_with_versions} with version history, {dropped} skipped); "
            f"current {bytes_to_gb(stats.total_current_size)} GB, "
            f"all versions {bytes_to_gb(stats.total_version_size)} GB, "
            f"overhead {bytes_to_gb(stats.overhead_bytes)} GB"
        )
        for name, path in result.artifacts.items():
            logger.info(f"{name}: {path}")
