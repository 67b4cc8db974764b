"""Search query model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from gdriveaudit.config import normalize_extensions


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """
    size >= min_size_bytes, ANDed with an OR of extension predicates.

    An empty extension set means all types.
    """

    min_size_bytes: int = 0
    extensions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, min_size_bytes: int, extensions: Iterable[str] = ()) -> "SearchQuery":
        if min_size_bytes < 0:
            raise ValueError("min_size_bytes must be >= 0")
        return cls(min_size_bytes=min_size_bytes, extensions=normalize_extensions(extensions))

    def render(self) -> str:
        q = f"size>={self.min_size_bytes}"
        if self.extensions:
            ors = " OR ".join(f"extension:{ext}" for ext in sorted(self.extensions))
            q = f"{q} AND ({ors})"
        return q

    def matches_extension(self, extension: str) -> bool:
        if not self.extensions:
            return True
        return extension.lstrip(".").lower() in self.extensions

    def matches_size(self, size: int) -> bool:
        return size >= self.min_size_bytes
