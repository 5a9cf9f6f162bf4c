"""PDF generator using PyQt6's QPrinter.

Slices the rendered report surface page by page and places each slice on an
A4 page. One raster-pixel-to-millimetre ratio is used for the whole document,
so every page shares the same horizontal scale and only the placed height
varies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from PyQt6.QtCore import QMarginsF, QRectF, QSizeF
from PyQt6.QtGui import QImage, QPageLayout, QPageSize, QPainter
from PyQt6.QtPrintSupport import QPrinter

from config.page_config import DEFAULT_PAGE_LAYOUT, MM_PER_INCH, PageLayout
from processing.pagination import Page, RasterizationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Where a page slice lands on the physical page, in mm."""

    x_mm: float
    y_mm: float
    width_mm: float
    height_mm: float


def slice_bounds(page: Page, surface_height: int) -> tuple[int, int]:
    """Integer raster rows ``[top, bottom)`` covered by ``page``, clamped to the surface."""
    top = max(0, int(round(page.pixel_top)))
    bottom = min(surface_height, int(round(page.pixel_bottom)))
    return top, max(top, bottom)


def slice_page(surface: QImage, page: Page, page_index: int = 0) -> QImage:
    """Copy the full-width band of ``surface`` for ``page`` without resampling."""
    top, bottom = slice_bounds(page, surface.height())
    if bottom <= top:
        raise RasterizationFailure(f"Page {page_index + 1} has no raster rows", page_index)
    band = surface.copy(0, top, surface.width(), bottom - top)
    if band.isNull():
        raise RasterizationFailure(f"Could not slice page {page_index + 1} from the report surface", page_index)
    return band


class PDFGenerator:
    """Write paginated report slices to a PDF file."""

    def __init__(self, page_layout: PageLayout = DEFAULT_PAGE_LAYOUT):
        self.page_layout = page_layout
        # Fixed for the whole document
        self.px_to_mm = page_layout.raster_px_to_mm

    def placement(self, surface_width: int, slice_height: int) -> Placement:
        """Physical placement of a slice: fixed margin offset, shared horizontal scale."""
        margin = self.page_layout.margin_mm
        return Placement(
            x_mm=margin,
            y_mm=margin,
            width_mm=surface_width * self.px_to_mm,
            height_mm=slice_height * self.px_to_mm,
        )

    def generate(self, surface: QImage, pages: Sequence[Page], output_path: str) -> int:
        """Generate the PDF and return the number of pages written."""
        if surface.isNull():
            raise RasterizationFailure("Report surface is empty")
        if not pages:
            raise RasterizationFailure("No pages to write")

        printer = self._setup_printer(output_path)

        painter = QPainter()
        if not painter.begin(printer):
            raise RasterizationFailure("Failed to initialize PDF painter")

        try:
            self._render_pages(painter, printer, surface, pages)
        finally:
            painter.end()

        logger.info(
            "Wrote %d page(s) to %s",
            len(pages),
            output_path,
            extra={"event": "report.pdf", "page_count": len(pages)},
        )
        return len(pages)

    def _setup_printer(self, output_path: str) -> QPrinter:
        """Configure QPrinter for PDF output; placement margins are applied by hand."""
        printer = QPrinter(QPrinter.PrinterMode.HighResolution)
        printer.setOutputFormat(QPrinter.OutputFormat.PdfFormat)
        printer.setOutputFileName(output_path)
        printer.setPageSize(
            QPageSize(
                QSizeF(self.page_layout.page_width_mm, self.page_layout.page_height_mm),
                QPageSize.Unit.Millimeter,
            )
        )
        printer.setPageOrientation(QPageLayout.Orientation.Portrait)
        printer.setResolution(self.page_layout.output_dpi)
        printer.setFullPage(True)
        printer.setPageMargins(QMarginsF(0, 0, 0, 0), QPageLayout.Unit.Millimeter)
        return printer

    def _render_pages(self, painter: QPainter, printer: QPrinter, surface: QImage, pages: Sequence[Page]) -> None:
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        mm_to_px = printer.resolution() / MM_PER_INCH

        for index, page in enumerate(pages):
            if index > 0 and not printer.newPage():
                raise RasterizationFailure(f"Could not start PDF page {index + 1}", index)

            top, bottom = slice_bounds(page, surface.height())
            if bottom <= top:
                # Only zero-height sections on this page: emit it blank
                continue

            band = slice_page(surface, page, index)
            placed = self.placement(surface.width(), band.height())
            target = QRectF(
                placed.x_mm * mm_to_px,
                placed.y_mm * mm_to_px,
                placed.width_mm * mm_to_px,
                placed.height_mm * mm_to_px,
            )
            painter.drawImage(target, band)

            logger.debug(
                "Placed page %d: rows %d-%d at %.1f x %.1f mm",
                index + 1,
                top,
                bottom,
                placed.width_mm,
                placed.height_mm,
            )
