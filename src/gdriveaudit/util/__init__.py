from .mime import (
    FOLDER_MIME,
    PAGE_ARTIFACT_MIMES,
    extension_of,
    is_folder,
    is_google_native,
    is_page_artifact,
    is_system_path,
)
from .time import (
    days_between,
    format_duration,
    format_timestamp,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    to_rfc3339,
)
from .units import BYTES_PER_GB, BYTES_PER_MB, bytes_to_gb, bytes_to_mb, mb_to_bytes

__all__ = [
    "FOLDER_MIME",
    "PAGE_ARTIFACT_MIMES",
    "is_folder",
    "is_google_native",
    "is_page_artifact",
    "is_system_path",
    "extension_of",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "days_between",
    "format_timestamp",
    "format_duration",
    "BYTES_PER_MB",
    "BYTES_PER_GB",
    "bytes_to_mb",
    "bytes_to_gb",
    "mb_to_bytes",
]
