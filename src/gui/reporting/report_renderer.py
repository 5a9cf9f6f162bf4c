"""Render report blocks onto one tall raster surface and measure their geometry.

Blocks are laid out on a layout surface measured in CSS pixels, then painted
onto a ``QImage`` that is ``render_scale`` times denser. The geometry
manifest stays in layout pixels; the section extractor reconciles the two
surfaces through their total heights.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QColor, QFont, QImage, QPainter, QTextDocument

from config.page_config import DEFAULT_PAGE_LAYOUT, PageLayout
from processing.pagination import (
    GeometryNode,
    GeometrySourceMissing,
    ImageResourceFailure,
    RasterizationFailure,
)
from utils.error_handling import ErrorCollector

from .constants import FONT_FAMILY, PRINT_COLORS
from .report_layout import (
    BODY_FONT_PX,
    IMAGE_LOAD_TIMEOUT_S,
    IMAGE_MAX_HEIGHT_MM,
    IMAGE_MAX_WIDTH_MM,
    IMAGE_ROW_GAP,
    IMAGE_SPACING_MM,
    IMAGES_PER_ROW,
    LOGO_GAP,
    LOGO_SIZE,
    SECTION_GAP,
)
from .report_models import ReportBlock, iter_leaf_blocks

logger = logging.getLogger(__name__)


def _load_image(path: Path) -> QImage:
    if not path.is_file():
        raise ImageResourceFailure(path, "file not found")
    image = QImage(str(path))
    if image.isNull():
        raise ImageResourceFailure(path, "unreadable or unsupported image data")
    return image


def load_images(
    paths: Iterable[Path],
    timeout: float = IMAGE_LOAD_TIMEOUT_S,
    collector: Optional[ErrorCollector] = None,
) -> Tuple[Dict[Path, QImage], List[ImageResourceFailure]]:
    """Load all images concurrently and wait until every load has settled.

    A failed or timed-out load is reported in the failure list and never
    raised; the caller leaves that image area blank. A load still running at
    the timeout is abandoned: its worker thread finishes a single local file
    read in the background and its result is discarded.
    """
    unique = list(dict.fromkeys(Path(p) for p in paths))
    loaded: Dict[Path, QImage] = {}
    failures: List[ImageResourceFailure] = []
    if not unique:
        return loaded, failures

    collector = collector or ErrorCollector("Image load")
    executor = ThreadPoolExecutor(max_workers=min(8, len(unique)), thread_name_prefix="report-image")
    try:
        futures = {executor.submit(_load_image, path): path for path in unique}
        done, not_done = wait(futures, timeout=timeout)

        for future, path in futures.items():
            if future in not_done:
                failure = ImageResourceFailure(path, f"timed out after {timeout:g}s")
            else:
                error = future.exception()
                if error is None:
                    loaded[path] = future.result()
                    continue
                failure = error if isinstance(error, ImageResourceFailure) else ImageResourceFailure(path, str(error))
            failures.append(failure)
            collector.add_exception(failure, f"Loading {path.name}")
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return loaded, failures


@dataclass
class _PlacedBlock:
    block: ReportBlock
    dom_top: float
    dom_height: float
    document: Optional[QTextDocument] = None
    text_offset_x: float = 0.0
    # (x, y, width, height, path) relative to the block origin
    image_slots: List[Tuple[float, float, float, float, Path]] = field(default_factory=list)


@dataclass
class RenderedReport:
    """Raster surface plus the layout-pixel geometry manifest of its sections."""

    surface: QImage
    manifest: List[GeometryNode]
    dom_height: float
    image_failures: List[ImageResourceFailure] = field(default_factory=list)

    @property
    def raster_height(self) -> int:
        return self.surface.height()


class ReportRenderer:
    """Lays out, measures and rasterizes report blocks."""

    def __init__(self, page_layout: PageLayout = DEFAULT_PAGE_LAYOUT, image_timeout: float = IMAGE_LOAD_TIMEOUT_S):
        self.page_layout = page_layout
        self.image_timeout = image_timeout

    def render(self, blocks: Sequence[ReportBlock]) -> RenderedReport:
        leaves = list(iter_leaf_blocks(blocks))
        if not leaves:
            raise GeometrySourceMissing("Report has no content blocks to measure")

        image_paths = [p for leaf in leaves for p in leaf.image_paths]
        image_paths += [leaf.logo_path for leaf in leaves if leaf.logo_path is not None]
        images, failures = load_images(image_paths, timeout=self.image_timeout)

        placed, dom_height = self._layout(leaves, images)
        surface = self._rasterize(placed, images, dom_height)

        manifest = [
            GeometryNode(
                tag=item.block.tag,
                force_break_before=item.block.force_break_before,
                dom_top=item.dom_top,
                dom_height=item.dom_height,
            )
            for item in placed
        ]

        logger.info(
            "Rendered report with %d sections (%d x %d px)",
            len(manifest),
            surface.width(),
            surface.height(),
            extra={
                "event": "report.render",
                "section_count": len(manifest),
                "image_failures": len(failures),
            },
        )
        return RenderedReport(surface=surface, manifest=manifest, dom_height=dom_height, image_failures=failures)

    # ------------------------------------------------------------------
    # Layout (CSS pixels)
    # ------------------------------------------------------------------

    def _layout(self, leaves: List[ReportBlock], images: Dict[Path, QImage]) -> Tuple[List[_PlacedBlock], float]:
        padding = self.page_layout.layout_padding_px
        width = self.page_layout.layout_width_px

        placed: List[_PlacedBlock] = []
        y = float(padding)
        for leaf in leaves:
            item = _PlacedBlock(block=leaf, dom_top=y, dom_height=0.0)
            content_height = 0.0
            if leaf.html or leaf.logo_path is not None:
                content_height = self._layout_text(item, width, images)
            if leaf.image_paths:
                # Grid sits under the block title, inside the same section
                content_height += self._layout_image_grid(item, images, content_height)
            item.dom_height = content_height + SECTION_GAP
            placed.append(item)
            y += item.dom_height

        return placed, y + padding

    def _layout_text(self, item: _PlacedBlock, width: int, images: Dict[Path, QImage]) -> float:
        logo = images.get(item.block.logo_path) if item.block.logo_path else None
        if logo is not None:
            item.text_offset_x = LOGO_SIZE + LOGO_GAP

        document = QTextDocument()
        document.setDocumentMargin(0)
        font = QFont(FONT_FAMILY)
        font.setPixelSize(BODY_FONT_PX)
        document.setDefaultFont(font)
        document.setHtml(item.block.html)
        document.setTextWidth(float(width - item.text_offset_x))
        item.document = document

        height = document.size().height()
        if logo is not None:
            height = max(height, float(LOGO_SIZE))
        return height

    def _layout_image_grid(self, item: _PlacedBlock, images: Dict[Path, QImage], top: float = 0.0) -> float:
        px_per_mm = self.page_layout.css_px_per_mm
        max_w = IMAGE_MAX_WIDTH_MM * px_per_mm
        max_h = IMAGE_MAX_HEIGHT_MM * px_per_mm
        spacing = IMAGE_SPACING_MM * px_per_mm

        y = top
        paths = list(item.block.image_paths)
        for row_start in range(0, len(paths), IMAGES_PER_ROW):
            row = paths[row_start:row_start + IMAGES_PER_ROW]
            y += IMAGE_ROW_GAP
            x = 0.0
            row_height = 0.0
            for path in row:
                image = images.get(path)
                if image is None:
                    # Failed load: keep the slot, leave it blank
                    w, h = max_w, max_h
                else:
                    scale = min(max_w / image.width(), max_h / image.height(), 1.0)
                    w, h = image.width() * scale, image.height() * scale
                item.image_slots.append((x, y, w, h, path))
                x += w + spacing
                row_height = max(row_height, h)
            y += row_height + IMAGE_ROW_GAP
        return y - top

    # ------------------------------------------------------------------
    # Rasterization
    # ------------------------------------------------------------------

    def _rasterize(self, placed: List[_PlacedBlock], images: Dict[Path, QImage], dom_height: float) -> QImage:
        scale = self.page_layout.render_scale
        dom_width = self.page_layout.layout_width_px + 2 * self.page_layout.layout_padding_px
        raster_width = int(math.ceil(dom_width * scale))
        raster_height = int(math.ceil(dom_height * scale))

        surface = QImage(raster_width, raster_height, QImage.Format.Format_RGB32)
        if surface.isNull():
            raise RasterizationFailure(f"Could not allocate a {raster_width}x{raster_height} report surface")
        surface.fill(QColor(PRINT_COLORS["page_bg"]))

        painter = QPainter()
        if not painter.begin(surface):
            raise RasterizationFailure("Failed to initialize report painter")

        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.scale(scale, scale)

            x0 = float(self.page_layout.layout_padding_px)
            for item in placed:
                self._draw_block(painter, x0, item, images)
        finally:
            painter.end()

        return surface

    def _draw_block(self, painter: QPainter, x0: float, item: _PlacedBlock, images: Dict[Path, QImage]) -> None:
        block = item.block
        if block.logo_path is not None and block.logo_path in images:
            painter.drawImage(QRectF(x0, item.dom_top, LOGO_SIZE, LOGO_SIZE), images[block.logo_path])

        if item.document is not None:
            painter.save()
            painter.translate(x0 + item.text_offset_x, item.dom_top)
            item.document.drawContents(painter)
            painter.restore()

        for x, y, w, h, path in item.image_slots:
            image = images.get(path)
            if image is not None:
                painter.drawImage(QRectF(x0 + x, item.dom_top + y, w, h), image)
