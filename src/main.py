"""
Plant Debugger - Report Export Entry Point

Exports a plant diagnosis (JSON from the diagnosis pipeline) and its photos
as a paginated A4 PDF report.
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from PyQt6.QtWidgets import QApplication

from processing.pagination import ReportExportError, describe_pages
from services.diagnosis_models import DiagnosisResult, ExportRequest
from services.report_export import ReportExportService
from utils.error_handling import user_error_message
from utils.logging_utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export a plant diagnosis report to PDF")
    parser.add_argument("diagnosis", type=Path, help="Diagnosis result JSON file")
    parser.add_argument("images", nargs="*", type=Path, help="Plant photos to include")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path.cwd(), help="Directory for the PDF")
    parser.add_argument("--logo", type=Path, default=None, help="Logo shown in the report header")
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Report date (YYYY-MM-DD)")
    parser.add_argument("--plan", action="store_true", help="Print the page plan after exporting")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()

    # Rendering needs a GUI application object but never a display
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Plant Debugger")

    try:
        diagnosis = DiagnosisResult.from_json_file(args.diagnosis)
    except (OSError, ValueError) as exc:
        print(f"Could not read diagnosis: {exc}", file=sys.stderr)
        return 1

    request = ExportRequest(
        diagnosis=diagnosis,
        output_dir=args.output_dir,
        image_paths=tuple(args.images),
        export_date=args.date or date.today(),
    )

    try:
        service = ReportExportService(logo_path=args.logo)
    except ValueError as exc:
        print(f"Invalid page configuration: {exc}", file=sys.stderr)
        return 1

    try:
        result = service.export(request)
    except ReportExportError as exc:
        print(user_error_message(exc), file=sys.stderr)
        return 1

    for failure in result.image_failures:
        print(f"Warning: {failure}", file=sys.stderr)
    if args.plan:
        print(describe_pages(result.pages).to_string(index=False))
    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
