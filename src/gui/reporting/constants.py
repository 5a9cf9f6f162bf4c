"""Shared constants for report rendering."""

from __future__ import annotations

# Colors for print (light background)
PRINT_COLORS = {
    "text": "#000000",
    "text_muted": "#6b7280",
    "border": "#dddddd",
    "accent": "#2d5016",
    "secondary_accent": "#666666",
    "summary_bg": "#f8f9fa",
    "page_bg": "#ffffff",
}

# Confidence badge colors
CONFIDENCE_COLORS = {
    "High": "#308300",
    "Medium": "#ecb100",
    "Low": "#b60012",
}
UNKNOWN_CONFIDENCE_COLOR = "#6c757d"

APP_NAME = "Plant Debugger"
REPORT_TITLE = "Debugging Report"
FONT_FAMILY = "Arial"


def confidence_color(confidence) -> str:
    """Badge color for a confidence tier (enum or string)."""
    key = getattr(confidence, "value", confidence)
    return CONFIDENCE_COLORS.get(key, UNKNOWN_CONFIDENCE_COLOR)
