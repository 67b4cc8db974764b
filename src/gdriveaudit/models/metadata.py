"""Ownership and revision data attached to a candidate file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

UNKNOWN: str = "Unknown"


@dataclass(frozen=True, slots=True)
class Identity:
    """A display-name/email pair as exposed by the metadata lookup."""

    display_name: str
    email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """Secondary lookup result. Every field may be absent."""

    author: Optional[Identity] = None
    created_by: Optional[Identity] = None
    modified_by: Optional[Identity] = None
    editor: Optional[Identity] = None
    modified: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class OwnershipInfo:
    owner: str
    last_accessed_date: Optional[datetime]
    owner_email: Optional[str] = None
    last_accessed_by: str = UNKNOWN


@dataclass(frozen=True, slots=True)
class VersionEntry:
    """One historical revision (the current content is not included)."""

    size: int
    created: datetime
