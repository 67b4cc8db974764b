"""Drive backend exports for gdriveaudit."""

from __future__ import annotations

from .drive_controller import DriveIndexController, to_drive_query

__all__ = ["DriveIndexController", "to_drive_query"]
