"""Field masks for Google Drive API requests."""

from __future__ import annotations

_USER: str = "displayName,emailAddress"

SEARCH_FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "fileExtension,"
    "size,"
    "quotaBytesUsed,"
    "parents,"
    "createdTime,"
    "modifiedTime,"
    "viewedByMeTime,"
    "webViewLink,"
    f"owners({_USER}),"
    f"lastModifyingUser({_USER})"
)

SEARCH_FIELDS: str = f"nextPageToken,files({SEARCH_FILE_FIELDS})"

LOOKUP_FIELDS: str = (
    "id,"
    "modifiedTime,"
    f"owners({_USER}),"
    f"sharingUser({_USER}),"
    f"lastModifyingUser({_USER})"
)

FOLDER_FIELDS: str = "id,name,parents"

REVISION_FIELDS: str = "nextPageToken,revisions(id,mimeType,size,modifiedTime)"
