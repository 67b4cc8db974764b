from __future__ import annotations

BYTES_PER_MB: int = 1024 * 1024
BYTES_PER_GB: int = 1024 * 1024 * 1024


def bytes_to_mb(size: int | float, ndigits: int = 2) -> float:
    return round(size / BYTES_PER_MB, ndigits)


def bytes_to_gb(size: int | float, ndigits: int = 2) -> float:
    return round(size / BYTES_PER_GB, ndigits)


def mb_to_bytes(size_mb: float) -> int:
    return int(size_mb * BYTES_PER_MB)
