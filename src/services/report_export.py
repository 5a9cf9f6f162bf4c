"""Export service for diagnosis reports.

Renders the report, extracts section geometry, packs sections into pages and
writes the PDF. The document is written to a temporary file and moved into
place only after every page was emitted, so a failed run leaves nothing behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from config.page_config import PageLayout
from gui.reporting.pdf_generator import PDFGenerator
from gui.reporting.report_document import ReportDocumentBuilder
from gui.reporting.report_renderer import ReportRenderer
from processing.pagination import (
    ImageResourceFailure,
    Page,
    PagePacker,
    RasterizationFailure,
    ReportExportError,
    extract_sections,
)
from utils.error_handling import log_exception, timed
from utils.slug import report_filename
from utils.timing import PhaseTimer

from .diagnosis_models import ExportRequest

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of a successful export."""

    path: Path
    pages: List[Page]
    image_failures: List[ImageResourceFailure] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.pages)


class ReportExportService:
    """Runs one export per call; no state is shared between runs."""

    def __init__(
        self,
        page_layout: Optional[PageLayout] = None,
        logo_path: Optional[Path] = None,
        renderer: Optional[ReportRenderer] = None,
        pdf_generator: Optional[PDFGenerator] = None,
    ) -> None:
        self.page_layout = page_layout or PageLayout.from_env()
        self.builder = ReportDocumentBuilder(logo_path)
        self.renderer = renderer or ReportRenderer(self.page_layout)
        self.pdf_generator = pdf_generator or PDFGenerator(self.page_layout)
        self.packer = PagePacker.for_layout(self.page_layout)

    def output_path_for(self, request: ExportRequest) -> Path:
        return request.output_dir / report_filename(request.diagnosis.plant, request.export_date)

    @timed
    def export(self, request: ExportRequest) -> ExportResult:
        """Export the report for ``request`` and return where it was written.

        Raises:
            ReportExportError: GeometrySourceMissing or RasterizationFailure;
                no file is left at the target path.
        """
        target = self.output_path_for(request)
        timer = PhaseTimer({"plant": request.diagnosis.plant})

        try:
            with timer.measure("render"):
                blocks = self.builder.build(request.diagnosis, request.image_paths, request.export_date)
                rendered = self.renderer.render(blocks)

            with timer.measure("extract"):
                sections = extract_sections(rendered.manifest, rendered.dom_height, rendered.raster_height)

            with timer.measure("pack"):
                pages = self.packer.pack(sections)

            with timer.measure("emit"):
                self._write_atomically(rendered.surface, pages, target)
        except ReportExportError as exc:
            log_exception(exc, "Report export failed", extra={"target": str(target)})
            raise

        durations = timer.durations()
        logger.info(
            "Exported %d page(s) to %s",
            len(pages),
            target,
            extra={"event": "report.export", "page_count": len(pages), **{f"t_{k}": v for k, v in durations.items()}},
        )
        return ExportResult(
            path=target,
            pages=pages,
            image_failures=list(rendered.image_failures),
            timings=durations,
        )

    def _write_atomically(self, surface, pages: List[Page], target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".export-", suffix=".pdf", dir=target.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)

        try:
            try:
                self.pdf_generator.generate(surface, pages, str(tmp_path))
            except ReportExportError:
                raise
            except Exception as exc:
                raise RasterizationFailure(f"PDF writer failed: {exc}") from exc

            if not tmp_path.exists() or tmp_path.stat().st_size == 0:
                raise RasterizationFailure("PDF writer produced no output")
            os.replace(tmp_path, target)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
