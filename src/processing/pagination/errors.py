"""Error taxonomy for report export."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ReportExportError(Exception):
    """Base class for failures surfaced to the user as a single export error."""

    user_message = "Failed to generate PDF. Please try again."
    retryable = True


class GeometrySourceMissing(ReportExportError):
    """The report surface to measure could not be located."""

    user_message = "Could not find the diagnosis report to export. Please try again."


class RasterizationFailure(ReportExportError):
    """A page slice could not be produced or written."""

    def __init__(self, message: str, page_index: Optional[int] = None):
        super().__init__(message)
        self.page_index = page_index


class ImageResourceFailure(ReportExportError):
    """An embedded image failed to load. Collected, never fatal."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not load image {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
