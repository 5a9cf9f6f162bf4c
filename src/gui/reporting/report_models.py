"""Report content models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple


@dataclass
class ReportBlock:
    """Node of the report content tree.

    Leaves are laid out and measured as atomic sections. A node with children
    is only a grouping; its ``force_break_before`` applies to its first leaf.
    """

    key: str                    # "primary_reasoning", "secondary_heading", ...
    tag: str = "section"        # "header", "section" or "subsection"
    html: str = ""
    force_break_before: bool = False
    image_paths: Tuple[Path, ...] = ()
    logo_path: Optional[Path] = None
    children: list["ReportBlock"] = field(default_factory=list)


def iter_leaf_blocks(blocks: Iterable[ReportBlock]) -> Iterator[ReportBlock]:
    """Flatten the tree in document order, pushing group break flags to the first leaf."""
    for block in blocks:
        if not block.children:
            yield block
            continue

        first = True
        for leaf in iter_leaf_blocks(block.children):
            if first and block.force_break_before and not leaf.force_break_before:
                leaf = replace(leaf, force_break_before=True)
            first = False
            yield leaf
