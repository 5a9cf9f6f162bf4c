"""Greedy page packing over a sequence of atomic sections.

Single left-to-right scan, never backtracking. A page grows one section at a
time until the next section is flagged to start a new page or would push the
page past ``max_usable_pixel_height - safety_margin_pixels``. A section taller
than ``max_usable_pixel_height + safety_margin_pixels`` is placed alone on its
own page rather than split or dropped, so every iteration makes progress.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import pandas as pd

from .models import Page, PageCapacity, Section

logger = logging.getLogger(__name__)


def pack_sections(
    sections: Sequence[Section],
    max_usable_pixel_height: float,
    safety_margin_pixels: float,
) -> List[Page]:
    """Partition ``sections`` into pages. Empty input yields no pages."""
    capacity = PageCapacity(max_usable_pixel_height, safety_margin_pixels)
    fill_limit = capacity.fill_limit
    oversize_limit = capacity.oversize_limit

    pages: List[Page] = []
    count = len(sections)
    page_start = 0

    while page_start < count:
        accumulated = 0.0
        index = page_start

        while index < count:
            section = sections[index]
            first_on_page = index == page_start
            if section.force_break_before and not first_on_page:
                break
            if first_on_page and section.height > oversize_limit:
                index += 1
                break
            if accumulated + section.height > fill_limit:
                break
            accumulated += section.height
            index += 1

        if index == page_start:
            # Single section taller than the fill limit but within the oversize limit
            index = page_start + 1

        pages.append(Page.from_sections(sections, page_start, index))
        page_start = index

    logger.debug(
        "Packed %d sections into %d pages",
        count,
        len(pages),
        extra={"event": "pagination.pack", "section_count": count, "page_count": len(pages)},
    )
    return pages


class PagePacker:
    """Packs sections against a fixed ``PageCapacity``."""

    def __init__(self, capacity: PageCapacity) -> None:
        self.capacity = capacity

    @classmethod
    def for_layout(cls, layout) -> "PagePacker":
        return cls(PageCapacity.from_layout(layout))

    def pack(self, sections: Sequence[Section]) -> List[Page]:
        return pack_sections(
            sections,
            self.capacity.max_usable_pixel_height,
            self.capacity.safety_margin_pixels,
        )


def describe_pages(pages: Sequence[Page]) -> pd.DataFrame:
    """Tabulate a page plan, one row per page."""
    columns = ["Page", "Start", "End", "Sections", "Top (px)", "Height (px)"]
    rows = [
        {
            "Page": number,
            "Start": page.start_section,
            "End": page.end_section_exclusive,
            "Sections": page.section_count,
            "Top (px)": round(page.pixel_top, 1),
            "Height (px)": round(page.pixel_height, 1),
        }
        for number, page in enumerate(pages, start=1)
    ]
    return pd.DataFrame(rows, columns=columns)
