"""Report pagination: section geometry extraction and greedy page packing."""

from .errors import (
    GeometrySourceMissing,
    ImageResourceFailure,
    RasterizationFailure,
    ReportExportError,
)
from .models import GeometryNode, Page, PageCapacity, Section
from .page_packer import PagePacker, describe_pages, pack_sections
from .section_geometry import dom_to_raster_scale, extract_sections, sections_from_manifest

__all__ = [
    "GeometryNode",
    "GeometrySourceMissing",
    "ImageResourceFailure",
    "Page",
    "PageCapacity",
    "PagePacker",
    "RasterizationFailure",
    "ReportExportError",
    "Section",
    "describe_pages",
    "dom_to_raster_scale",
    "extract_sections",
    "pack_sections",
    "sections_from_manifest",
]
