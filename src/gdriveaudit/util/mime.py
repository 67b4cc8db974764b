from __future__ import annotations

FOLDER_MIME: str = "application/vnd.google-apps.folder"
SHORTCUT_MIME: str = "application/vnd.google-apps.shortcut"

# Items that are pages/forms rather than stored documents.
PAGE_ARTIFACT_MIMES: set[str] = {
    FOLDER_MIME,
    SHORTCUT_MIME,
    "application/vnd.google-apps.form",
    "application/vnd.google-apps.site",
    "application/vnd.google-apps.script",
    "application/vnd.google-apps.fusiontable",
}

PAGE_ARTIFACT_EXTENSIONS: set[str] = {"aspx", "html", "htm"}

SYSTEM_FOLDER_NAMES: set[str] = {"Forms"}


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_page_artifact(file_type: str, extension: str = "") -> bool:
    """
    Returns True if the item is a page/form artifact instead of a document.

    file_type is the remote type marker (a MIME type for Drive, a bare
    extension-like token for other indexes).
    """
    if file_type in PAGE_ARTIFACT_MIMES:
        return True
    if file_type.lower() in PAGE_ARTIFACT_EXTENSIONS:
        return True
    return extension.lower() in PAGE_ARTIFACT_EXTENSIONS


def is_system_path(path: str) -> bool:
    """True if any path segment is hidden ('_' prefix) or a Forms folder."""
    for segment in path.replace("\\", "/").split("/"):
        if not segment:
            continue
        if segment.startswith("_") or segment in SYSTEM_FOLDER_NAMES:
            return True
    return False


def extension_of(name: str) -> str:
    """Lowercase extension without the dot ('' if none)."""
    base = name.rsplit("/", 1)[-1]
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem or not ext:
        return ""
    return ext.lower()


GOOGLE_APPS_PREFIX: str = "application/vnd.google-apps."


def is_google_native(mime_type: str) -> bool:
    """True for Docs/Sheets/Slides and other Google-native (non-binary) types."""
    return mime_type.startswith(GOOGLE_APPS_PREFIX)
