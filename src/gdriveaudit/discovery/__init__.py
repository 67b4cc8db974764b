"""Discovery exports for gdriveaudit."""

from __future__ import annotations

from .file_discovery import FileDiscovery, dedupe_by_path
from .query import SearchQuery

__all__ = ["FileDiscovery", "SearchQuery", "dedupe_by_path"]
