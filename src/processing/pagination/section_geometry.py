"""Section geometry extraction.

Converts the geometry manifest measured on the layout surface into ordered
``Section`` records in raster-surface pixels. The layout surface and the
raster surface differ in resolution; a single scale factor computed from
their total heights maps one onto the other so rounding does not accumulate
across many small sections.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

import numpy as np

from .errors import GeometrySourceMissing
from .models import GeometryNode, Section

logger = logging.getLogger(__name__)


def dom_to_raster_scale(dom_surface_height: float, raster_surface_height: float) -> float:
    """Return the single layout-to-raster ratio for one extraction pass."""
    if dom_surface_height <= 0:
        raise GeometrySourceMissing(
            f"Layout surface has no measurable height ({dom_surface_height})"
        )
    if raster_surface_height <= 0:
        raise GeometrySourceMissing(
            f"Raster surface has no measurable height ({raster_surface_height})"
        )
    return raster_surface_height / dom_surface_height


def extract_sections(
    nodes: Iterable[GeometryNode],
    dom_surface_height: float,
    raster_surface_height: float,
) -> List[Section]:
    """Map measured nodes to sections in raster pixels, ordered by top."""
    nodes = list(nodes)
    if not nodes:
        return []

    scale = dom_to_raster_scale(dom_surface_height, raster_surface_height)

    # Stable sort keeps document order for nodes sharing a top (zero-height siblings)
    order = sorted(range(len(nodes)), key=lambda i: nodes[i].dom_top)
    tops = np.array([nodes[i].dom_top for i in order], dtype=float) * scale
    heights = np.array([nodes[i].dom_height for i in order], dtype=float) * scale

    sections = [
        Section(
            top=float(top),
            height=float(height),
            force_break_before=nodes[i].force_break_before,
        )
        for i, top, height in zip(order, tops, heights)
    ]

    logger.debug(
        "Extracted %d sections (scale %.4f)",
        len(sections),
        scale,
        extra={"event": "pagination.extract", "section_count": len(sections), "scale": scale},
    )
    return sections


def sections_from_manifest(
    manifest: Iterable[Mapping[str, Any]],
    dom_surface_height: float,
    raster_surface_height: float,
) -> List[Section]:
    """Extract sections from raw manifest dicts."""
    nodes = [GeometryNode.from_dict(entry) for entry in manifest]
    return extract_sections(nodes, dom_surface_height, raster_surface_height)
