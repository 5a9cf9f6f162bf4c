"""Layout constants for the report surface, in CSS pixels (96 DPI)."""

from __future__ import annotations

# Vertical space owned by each block below its content, so blocks abut exactly
SECTION_GAP = 18

# Header
LOGO_SIZE = 80
LOGO_GAP = 20

# Plant image grid: up to 3 per row, 57mm x 50mm max, 4mm apart
IMAGES_PER_ROW = 3
IMAGE_MAX_WIDTH_MM = 57.0
IMAGE_MAX_HEIGHT_MM = 50.0
IMAGE_SPACING_MM = 4.0
IMAGE_ROW_GAP = 10

# Font sizes (px)
TITLE_FONT_PX = 28
SUBTITLE_FONT_PX = 20
SECTION_TITLE_FONT_PX = 18
BODY_FONT_PX = 14
BADGE_FONT_PX = 14

# Seconds to wait for all plant images before treating the rest as failed
IMAGE_LOAD_TIMEOUT_S = 10.0
