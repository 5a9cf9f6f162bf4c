"""Processing module for report pagination.

Key components:
- extract_sections: layout geometry to raster-pixel sections
- pack_sections / PagePacker: greedy packing of sections into pages
"""
