"""Data containers for report pagination."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


GEOMETRY_TAGS = frozenset({"header", "section", "subsection"})


@dataclass(frozen=True)
class GeometryNode:
    """One entry of the geometry manifest measured on the layout surface."""

    tag: str                  # "header", "section" or "subsection"
    force_break_before: bool
    dom_top: float
    dom_height: float

    def __post_init__(self) -> None:
        if self.tag not in GEOMETRY_TAGS:
            raise ValueError(f"Unknown geometry tag: {self.tag!r}")
        if self.dom_height < 0:
            raise ValueError(f"Negative height for {self.tag} at {self.dom_top}: {self.dom_height}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeometryNode":
        """Build a node from a manifest dict (``tag``, ``forceBreakBefore``, ``domTop``, ``domHeight``)."""
        try:
            return cls(
                tag=str(data["tag"]),
                force_break_before=bool(data.get("forceBreakBefore", False)),
                dom_top=float(data["domTop"]),
                dom_height=float(data["domHeight"]),
            )
        except KeyError as exc:
            raise ValueError(f"Geometry manifest entry missing key {exc}") from exc

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "forceBreakBefore": self.force_break_before,
            "domTop": self.dom_top,
            "domHeight": self.dom_height,
        }


@dataclass(frozen=True)
class Section:
    """Atomic block of report content in raster pixels. Never split across pages."""

    top: float
    height: float
    force_break_before: bool = False

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Page:
    """Span of consecutive sections assigned to one physical page."""

    start_section: int
    end_section_exclusive: int
    pixel_top: float
    pixel_height: float

    @classmethod
    def from_sections(cls, sections: Sequence[Section], start: int, end: int) -> "Page":
        """Create a page covering ``sections[start:end]`` with derived pixel geometry."""
        if not 0 <= start < end <= len(sections):
            raise ValueError(f"Invalid page span [{start}, {end}) for {len(sections)} sections")
        pixel_top = sections[start].top
        return cls(
            start_section=start,
            end_section_exclusive=end,
            pixel_top=pixel_top,
            pixel_height=sections[end - 1].bottom - pixel_top,
        )

    @property
    def section_count(self) -> int:
        return self.end_section_exclusive - self.start_section

    @property
    def pixel_bottom(self) -> float:
        return self.pixel_top + self.pixel_height

    def covers(self, index: int) -> bool:
        return self.start_section <= index < self.end_section_exclusive


@dataclass(frozen=True)
class PageCapacity:
    """Packing limits in raster pixels."""

    max_usable_pixel_height: float
    safety_margin_pixels: float

    def __post_init__(self) -> None:
        if self.max_usable_pixel_height < 0:
            raise ValueError(f"max_usable_pixel_height must be >= 0, got {self.max_usable_pixel_height}")
        if self.safety_margin_pixels < 0:
            raise ValueError(f"safety_margin_pixels must be >= 0, got {self.safety_margin_pixels}")

    @classmethod
    def from_layout(cls, layout) -> "PageCapacity":
        """Derive capacity from a ``config.page_config.PageLayout``."""
        return cls(
            max_usable_pixel_height=layout.max_usable_pixel_height,
            safety_margin_pixels=layout.safety_margin_px,
        )

    @property
    def fill_limit(self) -> float:
        """Height a page may be filled to before the next section is deferred."""
        return self.max_usable_pixel_height - self.safety_margin_pixels

    @property
    def oversize_limit(self) -> float:
        """Height above which a single section can never fit a page."""
        return self.max_usable_pixel_height + self.safety_margin_pixels
