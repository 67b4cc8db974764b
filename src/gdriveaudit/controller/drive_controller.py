"""Google Drive backend for search, metadata lookup and revision history."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Sequence, TypeVar

from googleapiclient.errors import HttpError

from gdriveaudit.auth import AuthInfo, OAuthClient
from gdriveaudit.discovery.query import SearchQuery
from gdriveaudit.errors import (
    AnalysisError,
    ApiError,
    HttpErrorInfo,
    NetworkError,
    NotFoundError,
    PermissionError,
    map_http_error,
)
from gdriveaudit.logging_config import get_logger
from gdriveaudit.models import CandidateFile, Identity, MetadataRecord, VersionEntry
from gdriveaudit.util.mime import FOLDER_MIME, extension_of, is_google_native
from gdriveaudit.util.time import parse_rfc3339

from .fields import FOLDER_FIELDS, LOOKUP_FIELDS, REVISION_FIELDS, SEARCH_FIELDS

T = TypeVar("T")

logger = get_logger(__name__)

_MAX_PATH_DEPTH: int = 64
_REVISION_PAGE_SIZE: int = 1000


@dataclass(slots=True)
class _QueryCursor:
    """Rows fetched so far for one query, and the token for the next Drive page."""

    rows: list[CandidateFile] = field(default_factory=list)
    next_token: Optional[str] = None
    exhausted: bool = False


class DriveIndexController:
    """
    Drive API adapter (read-only).

    Notes:
        - Offset pagination is served from a per-query cursor over Drive's
          nextPageToken, so any offset can be requested.
        - Each thread gets its own service object; httplib2 is not thread-safe.
        - No retries here: callers wrap calls in RetryPolicy.
    """

    DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.readonly",)

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
    ) -> None:
        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info)
        # Fail fast on bad credentials before the run starts.
        first = client.build_drive_service(use_scopes)
        self._init_state(lambda: client.build_drive_service(use_scopes), supports_all_drives)
        self._adopt(first)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
    ) -> "DriveIndexController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init_state(lambda: service, supports_all_drives)
        return obj

    @classmethod
    def from_service_factory(
        cls,
        factory: Callable[[], Any],
        *,
        supports_all_drives: bool = True,
    ) -> "DriveIndexController":
        obj = cls.__new__(cls)
        obj._init_state(factory, supports_all_drives)
        return obj

    def _init_state(self, factory: Callable[[], Any], supports_all_drives: bool) -> None:
        self._service_factory = factory
        self._supports_all_drives = supports_all_drives
        self._local = threading.local()
        self._services: list[Any] = []
        self._lock = threading.Lock()
        self._cursors: dict[str, _QueryCursor] = {}
        self._folders: dict[str, tuple[str, Optional[str]]] = {}

    # ----------------------------
    # Public API
    # ----------------------------
    def search(self, query: SearchQuery, offset: int, page_size: int) -> list[CandidateFile]:
        """Return rows [offset, offset + page_size) of the query results."""
        if offset < 0 or page_size < 1:
            raise ValueError("offset must be >= 0 and page_size >= 1")

        q = to_drive_query(query)
        cursor = self._cursors.setdefault(q, _QueryCursor())
        while len(cursor.rows) < offset + page_size and not cursor.exhausted:
            self._fetch_next_page(q, cursor, page_size)

        return cursor.rows[offset : offset + page_size]

    def lookup(self, item_id: str) -> Optional[MetadataRecord]:
        req = self._service.files().get(
            fileId=item_id,
            fields=LOOKUP_FIELDS,
            **self._common_kwargs(),
        )
        try:
            data = self._execute(req.execute)
        except NotFoundError:
            return None
        return _file_dict_to_metadata(data)

    def list_versions(self, item_id: str, mime_type: str = "") -> list[VersionEntry]:
        """
        Historical revisions, oldest first.

        Drive lists the head revision (the current content) last; it is
        dropped because the current content is counted separately.
        Revisions of native Google files (by the revision mimeType, or the
        file mime_type when Drive omits it) carry no size and count as 0 bytes.
        """
        revisions: list[dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.revisions().list(
                fileId=item_id,
                fields=REVISION_FIELDS,
                pageSize=_REVISION_PAGE_SIZE,
                pageToken=page_token,
            )
            data = self._execute(req.execute)
            revisions.extend(data.get("revisions", []) or [])

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return [_revision_dict_to_entry(item_id, r, mime_type) for r in revisions[:-1]]

    def close(self) -> None:
        """Close every service object this controller created and drop cached results."""
        with self._lock:
            services, self._services = self._services, []
            self._cursors = {}
            self._folders = {}
        for service in services:
            closer = getattr(service, "close", None)
            if callable(closer):
                closer()
        self._local = threading.local()

    # ----------------------------
    # Internals
    # ----------------------------
    @property
    def _service(self) -> Any:
        service = getattr(self._local, "service", None)
        if service is None:
            service = self._service_factory()
            self._adopt(service)
        return service

    def _adopt(self, service: Any) -> None:
        self._local.service = service
        with self._lock:
            if not any(s is service for s in self._services):
                self._services.append(service)

    def _common_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _fetch_next_page(self, q: str, cursor: _QueryCursor, page_size: int) -> None:
        req = self._service.files().list(
            q=q,
            fields=SEARCH_FIELDS,
            orderBy="quotaBytesUsed desc",
            pageSize=page_size,
            pageToken=cursor.next_token,
            **self._common_list_kwargs(),
        )
        data = self._execute(req.execute)
        for item in data.get("files", []) or []:
            cursor.rows.append(self._to_candidate(item))

        cursor.next_token = data.get("nextPageToken")
        if not cursor.next_token:
            cursor.exhausted = True

    def _to_candidate(self, data: dict[str, Any]) -> CandidateFile:
        path = self._resolve_path(data)
        return _file_dict_to_candidate(data, path)

    def _resolve_path(self, data: dict[str, Any]) -> str:
        name = data.get("name") or data.get("id") or ""
        segments = [name]
        parents = data.get("parents") or []
        parent_id: Optional[str] = parents[0] if parents else None

        for _ in range(_MAX_PATH_DEPTH):
            if parent_id is None:
                break
            folder = self._folder(parent_id)
            if folder is None:
                break
            folder_name, parent_id = folder
            segments.append(folder_name)

        return "/" + "/".join(reversed(segments))

    def _folder(self, folder_id: str) -> Optional[tuple[str, Optional[str]]]:
        if folder_id in self._folders:
            return self._folders[folder_id]

        req = self._service.files().get(
            fileId=folder_id,
            fields=FOLDER_FIELDS,
            **self._common_kwargs(),
        )
        try:
            data = self._execute(req.execute)
        except (NotFoundError, PermissionError):
            # Parent outside our visibility: treat as a root.
            logger.debug(f"Parent folder {folder_id} not accessible; path truncated")
            return None

        parents = data.get("parents") or []
        entry = (str(data.get("name") or folder_id), parents[0] if parents else None)
        self._folders[folder_id] = entry
        return entry

    def _execute(self, func: Callable[[], T]) -> T:
        try:
            return func()
        except Exception as exc:
            raise self._map_exception(exc) from exc

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def to_drive_query(query: SearchQuery) -> str:
    """
    Translate a SearchQuery to Drive 'q' syntax.

    Drive cannot filter on size; that predicate is applied by FileDiscovery.
    """
    q = f"trashed=false and mimeType != '{FOLDER_MIME}'"
    if query.extensions:
        ors = " or ".join(f"name contains '.{ext}'" for ext in sorted(query.extensions))
        q = f"{q} and ({ors})"
    return q


def _parse_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None


def _parse_size(data: dict[str, Any]) -> int:
    for key in ("size", "quotaBytesUsed"):
        value = data.get(key)
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
    return 0


def _identity(data: Any) -> Optional[Identity]:
    if not isinstance(data, dict):
        return None
    name = data.get("displayName")
    email = data.get("emailAddress")
    if not isinstance(name, str) or not name.strip():
        if isinstance(email, str) and email:
            name = email
        else:
            return None
    return Identity(display_name=name, email=email if isinstance(email, str) else None)


def _first_owner(data: dict[str, Any]) -> Optional[Identity]:
    owners = data.get("owners") or []
    if isinstance(owners, list) and owners:
        return _identity(owners[0])
    return None


def _file_dict_to_candidate(data: dict[str, Any], path: str) -> CandidateFile:
    name = data.get("name", "")
    name = name if isinstance(name, str) else ""
    extension = data.get("fileExtension")
    if not isinstance(extension, str) or not extension:
        extension = extension_of(name)

    owner = _first_owner(data)
    modifier = _identity(data.get("lastModifyingUser"))
    file_id = data.get("id")

    return CandidateFile(
        path=path,
        name=name,
        extension=extension.lower(),
        size=_parse_size(data),
        last_modified=_parse_time(data.get("modifiedTime")),
        created=_parse_time(data.get("createdTime")),
        url=data.get("webViewLink") or "",
        author=owner.display_name if owner else None,
        created_by=owner.email if owner else None,
        modified_by=modifier.display_name if modifier else None,
        last_viewed=_parse_time(data.get("viewedByMeTime")),
        item_id=file_id if isinstance(file_id, str) else "",
        file_type=data.get("mimeType") or "",
    )


def _file_dict_to_metadata(data: dict[str, Any]) -> MetadataRecord:
    return MetadataRecord(
        author=_first_owner(data),
        created_by=_identity(data.get("sharingUser")),
        modified_by=_identity(data.get("lastModifyingUser")),
        modified=_parse_time(data.get("modifiedTime")),
    )


def _revision_dict_to_entry(
    item_id: str,
    data: dict[str, Any],
    file_mime_type: str = "",
) -> VersionEntry:
    size = data.get("size")
    created = _parse_time(data.get("modifiedTime"))
    if isinstance(size, str) and size.isdigit():
        size = int(size)
    elif size is None and is_google_native(str(data.get("mimeType") or file_mime_type)):
        # Native Docs/Sheets/Slides revisions use no storage quota.
        size = 0
    if not isinstance(size, int) or created is None:
        raise AnalysisError(
            "Malformed revision entry",
            details={"file_id": item_id, "revision_id": data.get("id")},
        )
    return VersionEntry(size=size, created=created)


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = {}
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
