"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from processing.pagination import Section
from services.diagnosis_models import DiagnosisResult


# ---------------------------------------------------------------------------
# Qt Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def qt_app():
    """Provide a QApplication instance for rendering tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    app.processEvents()
    yield app
    app.processEvents()


@pytest.fixture
def make_png(qt_app, tmp_path):
    """Factory writing a solid-color PNG and returning its path."""
    from PyQt6.QtGui import QColor, QImage

    def _make(name: str = "leaf.png", width: int = 120, height: int = 80, color: str = "#2d5016") -> Path:
        image = QImage(width, height, QImage.Format.Format_RGB32)
        image.fill(QColor(color))
        path = tmp_path / name
        assert image.save(str(path), "PNG")
        return path

    return _make


# ---------------------------------------------------------------------------
# Diagnosis Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def diagnosis_payload() -> dict:
    """Flat pipeline JSON with a primary and a secondary diagnosis."""
    return {
        "plant": "Monstera Deliciosa",
        "primaryDiagnosis": "Overwatering",
        "primaryConfidence": "High",
        "primarySummary": "Roots are sitting in wet soil.",
        "primaryReasoning": "- Yellowing lower leaves\n- Soil stays wet for days\n\nDrainage looks **poor**.",
        "primaryTreatmentPlan": "1. Stop watering\n2. Repot into chunky mix\n3. Trim mushy roots",
        "primaryPreventionTips": "* Water only when the top 5 cm are dry\n* Use a pot with drainage",
        "secondaryDiagnosis": "Root Rot",
        "secondaryConfidence": "low",
        "secondaryReasoning": "Dark, soft roots near the base.",
        "secondaryTreatmentPlan": "",
        "secondaryPreventionTips": "- Sterilize tools between cuts",
    }


@pytest.fixture
def sample_diagnosis(diagnosis_payload) -> DiagnosisResult:
    return DiagnosisResult.from_dict(diagnosis_payload)


@pytest.fixture
def primary_only_diagnosis(diagnosis_payload) -> DiagnosisResult:
    payload = {k: v for k, v in diagnosis_payload.items() if not k.startswith("secondary")}
    return DiagnosisResult.from_dict(payload)


# ---------------------------------------------------------------------------
# Pagination Fixtures
# ---------------------------------------------------------------------------

def contiguous_sections(heights, force=()):
    """Build abutting sections from heights; ``force`` lists indices with a forced break."""
    sections = []
    top = 0.0
    for index, height in enumerate(heights):
        sections.append(Section(top=top, height=float(height), force_break_before=index in force))
        top += height
    return sections


@pytest.fixture
def make_sections():
    return contiguous_sections
