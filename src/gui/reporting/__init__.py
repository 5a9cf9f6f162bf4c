"""Reporting package for PDF export of diagnosis reports.

This package provides components for exporting a diagnosis report:
- ReportDocumentBuilder: Diagnosis result to ordered report blocks
- ReportRenderer: Block layout, geometry manifest and raster surface
- PDFGenerator: QPrinter-based page placement and PDF output
"""

from .pdf_generator import PDFGenerator
from .report_document import ReportDocumentBuilder
from .report_renderer import RenderedReport, ReportRenderer

__all__ = [
    "PDFGenerator",
    "RenderedReport",
    "ReportDocumentBuilder",
    "ReportRenderer",
]
