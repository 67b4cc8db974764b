"""Data model for items returned by the search index."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class CandidateFile:
    """
    A document discovered by the search phase, before enrichment.

    Notes:
        - path is the unique key within one run.
        - item_id is the remote identifier used for follow-up lookups
          (Drive file id). Indexes without ids may leave it empty; path is
          used instead.
        - rank is the position in the discovery output (0-based).
        - created/last_modified are None when the index returned no valid
          timestamp; such files are dropped at analysis.
    """

    path: str
    name: str
    extension: str
    size: int
    last_modified: Optional[datetime]
    created: Optional[datetime]
    url: str = ""

    author: Optional[str] = None
    created_by: Optional[str] = None
    modified_by: Optional[str] = None
    views_lifetime: int = 0
    views_recent: int = 0
    last_viewed: Optional[datetime] = None
    checkout_user: Optional[str] = None

    item_id: str = ""
    file_type: str = ""
    rank: int = 0

    @property
    def remote_id(self) -> str:
        return self.item_id or self.path

    def with_rank(self, rank: int) -> "CandidateFile":
        return replace(self, rank=rank)
