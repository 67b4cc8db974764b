"""Paginated, deduplicated discovery of large files from the search index."""

from __future__ import annotations

import time
from typing import Any, Callable, Iterable, Optional

from gdriveaudit.errors import DiscoveryError
from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import CandidateFile
from gdriveaudit.retry import RetryPolicy
from gdriveaudit.util.mime import is_page_artifact, is_system_path

from .query import SearchQuery

logger = get_logger(__name__)


class FileDiscovery:
    """
    Query the index page by page and return the top-N largest documents.

    The index is any object with:
        search(query: SearchQuery, offset: int, page_size: int) -> list[CandidateFile]
    """

    def __init__(
        self,
        index: Any,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        page_delay_sec: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._index = index
        self._retry_policy = retry_policy
        self._page_delay_sec = page_delay_sec
        self._sleep = sleep

    def discover(
        self,
        min_size_bytes: int,
        extensions: Optional[Iterable[str]] = None,
        *,
        page_size: int = 500,
        top_n: int = 5000,
    ) -> list[CandidateFile]:
        """
        Returns:
            Candidates sorted by size descending (ties keep discovery order),
            one per path, at most top_n. Empty when nothing matched.

        Raises:
            DiscoveryError: if a page cannot be fetched.
        """
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        if top_n < 0:
            raise ValueError("top_n must be >= 0")

        query = SearchQuery.build(min_size_bytes, extensions or ())
        logger.info(f"Searching for files: {query.render()}")

        admitted: list[CandidateFile] = []
        offset = 0
        while True:
            rows = self._fetch_page(query, offset, page_size)
            kept = [row for row in rows if _is_admitted(row, query)]
            admitted.extend(kept)
            logger.debug(
                f"Page at offset {offset}: {len(rows)} rows, {len(kept)} admitted"
            )

            if len(rows) < page_size:
                break
            offset += page_size
            if self._page_delay_sec > 0:
                self._sleep(self._page_delay_sec)

        unique = dedupe_by_path(admitted)
        # list.sort is stable: equal sizes keep their discovery order.
        unique.sort(key=lambda f: f.size, reverse=True)
        top = [f.with_rank(i) for i, f in enumerate(unique[:top_n])]

        logger.info(
            f"Discovery found {len(admitted)} matching rows, {len(unique)} unique; "
            f"keeping {len(top)}"
        )
        return top

    def _fetch_page(self, query: SearchQuery, offset: int, page_size: int) -> list[CandidateFile]:
        def _call() -> list[CandidateFile]:
            return list(self._index.search(query, offset, page_size))

        if self._retry_policy is None:
            try:
                return _call()
            except Exception as exc:
                raise DiscoveryError(
                    "Search query failed",
                    details={"offset": offset, "query": query.render()},
                    cause=exc,
                ) from exc

        outcome = self._retry_policy.execute(_call, label=f"search page @{offset}")
        if not outcome.ok:
            raise DiscoveryError(
                "Search query failed",
                details={
                    "offset": offset,
                    "query": query.render(),
                    "attempts": outcome.attempts,
                },
                cause=outcome.error,
            ) from outcome.error
        return outcome.value or []


def _is_admitted(row: CandidateFile, query: SearchQuery) -> bool:
    if is_page_artifact(row.file_type, row.extension):
        return False
    if is_system_path(row.path):
        return False
    if not query.matches_size(row.size):
        return False
    return query.matches_extension(row.extension)


def dedupe_by_path(files: Iterable[CandidateFile]) -> list[CandidateFile]:
    """Keep the first entry per path, preserving order."""
    seen: set[str] = set()
    out: list[CandidateFile] = []
    for f in files:
        if f.path in seen:
            continue
        seen.add(f.path)
        out.append(f)
    return out
