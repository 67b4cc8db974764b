"""Ownership and last-access resolution with fallback chains."""

from __future__ import annotations

from typing import Any, Optional

from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import (
    UNKNOWN,
    CandidateFile,
    Identity,
    MetadataRecord,
    OwnershipInfo,
)

logger = get_logger(__name__)


class FileEnricher:
    """
    Resolve owner / last-accessed attributes for a candidate file.

    The lookup is any object with:
        lookup(item_id: str) -> MetadataRecord | None

    enrich() never raises: lookup failures fall back to the candidate's own
    fields.
    """

    def __init__(self, lookup: Any) -> None:
        self._lookup = lookup

    def enrich(self, file: CandidateFile) -> OwnershipInfo:
        meta: Optional[MetadataRecord]
        try:
            meta = self._lookup.lookup(file.remote_id)
        except Exception as exc:
            logger.warning(
                f"Metadata lookup failed for {file.path} "
                f"({type(exc).__name__}: {exc}); using search fields"
            )
            meta = None
        return resolve_ownership(file, meta or MetadataRecord())


def resolve_ownership(file: CandidateFile, meta: MetadataRecord) -> OwnershipInfo:
    owner_identity = _first_identity(meta.author, meta.created_by)
    if owner_identity is not None:
        owner = owner_identity.display_name
        owner_email = owner_identity.email or None
    else:
        owner = _first_text(file.author, file.created_by) or UNKNOWN
        owner_email = None

    accessed_identity = _first_identity(meta.modified_by, meta.editor)
    if accessed_identity is not None:
        last_accessed_by = accessed_identity.display_name
    else:
        last_accessed_by = _first_text(file.modified_by) or UNKNOWN

    return OwnershipInfo(
        owner=owner,
        owner_email=owner_email,
        last_accessed_by=last_accessed_by,
        last_accessed_date=meta.modified or file.last_modified,
    )


def _first_identity(*candidates: Optional[Identity]) -> Optional[Identity]:
    for identity in candidates:
        if identity is not None and identity.display_name and identity.display_name.strip():
            return identity
    return None


def _first_text(*candidates: Optional[str]) -> Optional[str]:
    for value in candidates:
        if value and value.strip():
            return value
    return None
