"""Tests for the report export service."""

from datetime import date

import pytest

from config.page_config import PageLayout
from processing.pagination import GeometrySourceMissing, RasterizationFailure
from services.diagnosis_models import ExportRequest
from services.report_export import ReportExportService


class ExplodingGenerator:
    def __init__(self, write_partial=True):
        self.write_partial = write_partial

    def generate(self, surface, pages, output_path):
        if self.write_partial:
            with open(output_path, "wb") as handle:
                handle.write(b"%PDF-partial")
        raise RuntimeError("disk full")


class NoSourceRenderer:
    def render(self, blocks):
        raise GeometrySourceMissing("report root not found")


@pytest.fixture
def layout():
    return PageLayout(render_scale=2, output_dpi=72)


@pytest.fixture
def export_request(sample_diagnosis, tmp_path):
    return ExportRequest(
        diagnosis=sample_diagnosis,
        output_dir=tmp_path / "out",
        export_date=date(2026, 10, 19),
    )


def test_export_writes_named_pdf(qt_app, layout, export_request):
    result = ReportExportService(page_layout=layout).export(export_request)

    assert result.path.name == "plant-diagnosis-monsteradeliciosa-2026-10-19.pdf"
    assert result.path.read_bytes().startswith(b"%PDF")
    assert result.page_count >= 2
    assert [p.name for p in export_request.output_dir.iterdir()] == [result.path.name]


def test_secondary_diagnosis_starts_new_page(qt_app, layout, export_request):
    result = ReportExportService(page_layout=layout).export(export_request)

    assert 7 in [page.start_section for page in result.pages]


def test_pages_cover_every_section_once(qt_app, layout, export_request):
    pages = ReportExportService(page_layout=layout).export(export_request).pages

    assert pages[0].start_section == 0
    for previous, current in zip(pages, pages[1:]):
        assert current.start_section == previous.end_section_exclusive


def test_timings_recorded_per_phase(qt_app, layout, export_request):
    result = ReportExportService(page_layout=layout).export(export_request)
    assert set(result.timings) == {"render", "extract", "pack", "emit"}


def test_writer_failure_leaves_no_file(qt_app, layout, export_request):
    service = ReportExportService(page_layout=layout, pdf_generator=ExplodingGenerator())

    with pytest.raises(RasterizationFailure) as excinfo:
        service.export(export_request)

    assert "disk full" in str(excinfo.value)
    assert list(export_request.output_dir.iterdir()) == []


def test_missing_geometry_source_propagates(qt_app, layout, export_request):
    service = ReportExportService(page_layout=layout, renderer=NoSourceRenderer())

    with pytest.raises(GeometrySourceMissing):
        service.export(export_request)
    assert not service.output_path_for(export_request).exists()


def test_missing_image_is_reported_not_fatal(qt_app, layout, sample_diagnosis, make_png, tmp_path):
    request = ExportRequest(
        diagnosis=sample_diagnosis,
        output_dir=tmp_path,
        image_paths=[make_png("leaf.png"), tmp_path / "gone.jpg"],
        export_date=date(2026, 10, 19),
    )
    result = ReportExportService(page_layout=layout).export(request)

    assert result.path.exists()
    assert [f.path.name for f in result.image_failures] == ["gone.jpg"]


def test_default_layout_comes_from_environment(qt_app, monkeypatch):
    monkeypatch.setenv("PLANTDBG_SAFETY_MARGIN_PX", "25")
    service = ReportExportService()

    assert service.page_layout.safety_margin_px == 25
    assert service.packer.capacity.safety_margin_pixels == 25
