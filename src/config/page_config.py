"""Physical page format and raster scale configuration for report export."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


MM_PER_INCH = 25.4

# A4 portrait, in mm
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

# Margin around the placed page image, in mm
PAGE_MARGIN_MM = 8.0

# Padding of the off-screen layout surface (mm, converted at CSS_DPI)
LAYOUT_PADDING_MM = 15.0

# Layout measurement happens at web DPI; the raster is RENDER_SCALE times denser
CSS_DPI = 96.0
RENDER_SCALE = 3.0

# Shrink placed content to 90% so it sits inside the margins
CONTENT_SCALING = 0.9

# Raster pixels of slack between layout measurement and raster measurement
SAFETY_MARGIN_PX = 10.0

OUTPUT_DPI = 300

ENV_RENDER_SCALE = "PLANTDBG_RENDER_SCALE"
ENV_SAFETY_MARGIN_PX = "PLANTDBG_SAFETY_MARGIN_PX"
ENV_OUTPUT_DPI = "PLANTDBG_OUTPUT_DPI"
ENV_PAGE_MARGIN_MM = "PLANTDBG_PAGE_MARGIN_MM"


@dataclass(frozen=True)
class PageLayout:
    """Page geometry shared by the renderer, the packer capacity and the PDF writer."""

    page_width_mm: float = A4_WIDTH_MM
    page_height_mm: float = A4_HEIGHT_MM
    margin_mm: float = PAGE_MARGIN_MM
    layout_padding_mm: float = LAYOUT_PADDING_MM
    css_dpi: float = CSS_DPI
    render_scale: float = RENDER_SCALE
    content_scaling: float = CONTENT_SCALING
    safety_margin_px: float = SAFETY_MARGIN_PX
    output_dpi: int = OUTPUT_DPI

    def __post_init__(self) -> None:
        if self.render_scale <= 0:
            raise ValueError(f"render_scale must be positive, got {self.render_scale}")
        if self.css_dpi <= 0:
            raise ValueError(f"css_dpi must be positive, got {self.css_dpi}")
        if not 0 < self.content_scaling <= 1:
            raise ValueError(f"content_scaling must be in (0, 1], got {self.content_scaling}")
        if self.safety_margin_px < 0:
            raise ValueError(f"safety_margin_px must be >= 0, got {self.safety_margin_px}")
        if self.output_dpi <= 0:
            raise ValueError(f"output_dpi must be positive, got {self.output_dpi}")
        if self.margin_mm < 0 or 2 * self.margin_mm >= min(self.page_width_mm, self.page_height_mm):
            raise ValueError(f"margin_mm out of range: {self.margin_mm}")

    @property
    def usable_width_mm(self) -> float:
        return self.page_width_mm - 2 * self.margin_mm

    @property
    def usable_height_mm(self) -> float:
        return self.page_height_mm - 2 * self.margin_mm

    @property
    def css_px_per_mm(self) -> float:
        return self.css_dpi / MM_PER_INCH

    @property
    def layout_width_px(self) -> int:
        """Width of the text column on the layout surface, in CSS pixels."""
        return int(round((self.page_width_mm - 2 * self.layout_padding_mm) * self.css_px_per_mm))

    @property
    def layout_padding_px(self) -> int:
        return int(round(self.layout_padding_mm * self.css_px_per_mm))

    @property
    def raster_px_to_mm(self) -> float:
        """Single document-wide ratio from raster pixels to placed millimetres."""
        return MM_PER_INCH / (self.css_dpi * self.render_scale) * self.content_scaling

    @property
    def max_usable_pixel_height(self) -> float:
        """Usable page height expressed in raster pixels.

        ``content_scaling`` cancels out here, so a full page of content is placed
        at ``usable_height_mm * content_scaling`` and never reaches the bottom margin.
        """
        return (self.usable_height_mm * self.content_scaling) / self.raster_px_to_mm

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PageLayout":
        """Build a layout with overrides from ``PLANTDBG_*`` environment variables."""
        env = os.environ if environ is None else environ
        layout = cls()
        overrides = {}

        render_scale = _read_float(env, ENV_RENDER_SCALE)
        if render_scale is not None:
            overrides["render_scale"] = render_scale

        safety_margin = _read_float(env, ENV_SAFETY_MARGIN_PX)
        if safety_margin is not None:
            overrides["safety_margin_px"] = safety_margin

        margin = _read_float(env, ENV_PAGE_MARGIN_MM)
        if margin is not None:
            overrides["margin_mm"] = margin

        dpi = _read_float(env, ENV_OUTPUT_DPI)
        if dpi is not None:
            overrides["output_dpi"] = int(dpi)

        return replace(layout, **overrides) if overrides else layout


def _read_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


DEFAULT_PAGE_LAYOUT = PageLayout()
