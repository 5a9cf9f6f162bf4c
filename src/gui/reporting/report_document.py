"""Build the diagnosis report content tree from a DiagnosisResult."""

from __future__ import annotations

import html
import re
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from services.diagnosis_models import DiagnosisBlock, DiagnosisResult

from .constants import APP_NAME, FONT_FAMILY, PRINT_COLORS, REPORT_TITLE, confidence_color
from .report_layout import (
    BADGE_FONT_PX,
    BODY_FONT_PX,
    SECTION_TITLE_FONT_PX,
    SUBTITLE_FONT_PX,
    TITLE_FONT_PX,
)
from .report_models import ReportBlock

BULLET_RE = re.compile(r"^[-*+]\s+")
NUMBERED_RE = re.compile(r"^\d+\.\s+")
BOLD_RE = re.compile(r"(\*\*.*?\*\*)")


def inline_markup_to_html(text: str) -> str:
    """Escape text and turn ``**bold**`` runs into <b> tags."""
    parts = []
    for part in BOLD_RE.split(text):
        if len(part) >= 4 and part.startswith("**") and part.endswith("**"):
            parts.append(f"<b>{html.escape(part[2:-2])}</b>")
        else:
            parts.append(html.escape(part))
    return "".join(parts)


def markup_to_html(text: Optional[str]) -> str:
    """Convert the pipeline's lightweight markup to rich text.

    ``-``/``*``/``+`` lines become bullet lists, ``1.`` lines numbered lists,
    any other non-blank line a paragraph.
    """
    elements: List[str] = []
    items: List[str] = []
    list_type: Optional[str] = None

    def flush() -> None:
        nonlocal items, list_type
        if items:
            body = "".join(f"<li>{inline_markup_to_html(item)}</li>" for item in items)
            elements.append(f"<{list_type}>{body}</{list_type}>")
        items = []
        list_type = None

    for line in (text or "").splitlines():
        stripped = line.strip()
        if BULLET_RE.match(stripped):
            if list_type != "ul":
                flush()
                list_type = "ul"
            items.append(BULLET_RE.sub("", stripped, count=1))
        elif NUMBERED_RE.match(stripped):
            if list_type != "ol":
                flush()
                list_type = "ol"
            items.append(NUMBERED_RE.sub("", stripped, count=1))
        elif stripped:
            flush()
            elements.append(f"<p>{inline_markup_to_html(stripped)}</p>")

    flush()
    return "".join(elements)


def _wrap(body: str) -> str:
    return (
        f'<div style="font-family:{FONT_FAMILY}; font-size:{BODY_FONT_PX}px; '
        f'color:{PRINT_COLORS["text"]};">{body}</div>'
    )


def _section_title(title: str, color: Optional[str] = None) -> str:
    color = color or PRINT_COLORS["text"]
    return (
        f'<h3 style="font-size:{SECTION_TITLE_FONT_PX}px; color:{color}; margin-bottom:8px;">'
        f"{html.escape(title)}</h3>"
    )


def _badge(block: DiagnosisBlock) -> str:
    if block.confidence is None:
        return ""
    return (
        f'<p><span style="background-color:{confidence_color(block.confidence)}; color:#ffffff; '
        f'font-weight:bold; font-size:{BADGE_FONT_PX}px;">&nbsp;{block.confidence.value} Confidence&nbsp;</span></p>'
    )


def _text_block(key: str, title: str, text: str, tag: str = "section", color: Optional[str] = None) -> ReportBlock:
    return ReportBlock(key=key, tag=tag, html=_wrap(_section_title(title, color) + markup_to_html(text)))


class ReportDocumentBuilder:
    """Assembles the ordered report blocks for one diagnosis."""

    def __init__(self, logo_path: Optional[Path] = None) -> None:
        self._logo_path = Path(logo_path) if logo_path else None

    def build(
        self,
        diagnosis: DiagnosisResult,
        image_paths: Sequence[Path] = (),
        generated_on: Optional[date] = None,
    ) -> List[ReportBlock]:
        generated_on = generated_on or date.today()
        blocks = [
            self._header(generated_on),
            ReportBlock(
                key="plant",
                html=_wrap(
                    f'<h2 style="font-size:{SUBTITLE_FONT_PX}px; color:{PRINT_COLORS["accent"]};">'
                    f"Plant Identified: {html.escape(diagnosis.plant)}</h2>"
                ),
            ),
        ]

        if image_paths:
            blocks.append(
                ReportBlock(
                    key="images",
                    html=_wrap(_section_title("Plant Images")),
                    image_paths=tuple(Path(p) for p in image_paths),
                )
            )

        blocks.extend(self._diagnosis_blocks("primary", "Primary Diagnosis", diagnosis.primary))

        if diagnosis.secondary is not None:
            blocks.append(
                ReportBlock(
                    key="secondary",
                    force_break_before=True,
                    children=self._diagnosis_blocks(
                        "secondary",
                        "Secondary Diagnosis",
                        diagnosis.secondary,
                        tag="subsection",
                        color=PRINT_COLORS["secondary_accent"],
                    ),
                )
            )

        return blocks

    def _header(self, generated_on: date) -> ReportBlock:
        body = (
            f'<div align="center">'
            f'<h1 style="font-size:{TITLE_FONT_PX}px;">{html.escape(APP_NAME)}</h1>'
            f'<h2 style="font-size:{SUBTITLE_FONT_PX + 5}px; font-weight:normal;">{html.escape(REPORT_TITLE)}</h2>'
            f'<p style="color:{PRINT_COLORS["text_muted"]};">Generated on {generated_on.isoformat()}</p>'
            f"</div>"
        )
        return ReportBlock(key="header", tag="header", html=_wrap(body), logo_path=self._logo_path)

    def _diagnosis_blocks(
        self,
        prefix: str,
        title: str,
        block: DiagnosisBlock,
        tag: str = "section",
        color: Optional[str] = None,
    ) -> List[ReportBlock]:
        heading_color = color or PRINT_COLORS["accent"]
        blocks = [
            ReportBlock(
                key=f"{prefix}_heading",
                tag=tag,
                html=_wrap(
                    f'<h2 style="font-size:{SUBTITLE_FONT_PX}px; color:{heading_color};">'
                    f"{html.escape(title)}: {html.escape(block.label)}</h2>" + _badge(block)
                ),
            )
        ]

        if block.summary:
            blocks.append(_text_block(f"{prefix}_summary", "Summary", block.summary, tag, heading_color))

        # The primary diagnosis always shows its three sections; secondary only when present
        for key, section_title, text in (
            ("reasoning", "Reasoning", block.reasoning),
            ("treatment", "Treatment Plan", block.treatment_plan),
            ("prevention", "Prevention Tips", block.prevention_tips),
        ):
            if text or prefix == "primary":
                blocks.append(_text_block(f"{prefix}_{key}", section_title, text, tag))

        return blocks
