"""Utilities for generating filesystem-safe filename tokens."""

import re
from datetime import date
from typing import Optional

TOKEN_INVALID = re.compile(r"[^a-z0-9]+")

REPORT_FILE_PREFIX = "plant-diagnosis"


def filename_token(text: Optional[str], default: str = "plant") -> str:
    """Lower-case ``text`` and drop every character outside a-z and 0-9."""
    token = TOKEN_INVALID.sub("", (text or "").strip().lower())
    return token or default


def report_filename(plant: Optional[str], export_date: date, extension: str = "pdf") -> str:
    """Build ``plant-diagnosis-<token>-<YYYY-MM-DD>.<extension>``."""
    return f"{REPORT_FILE_PREFIX}-{filename_token(plant)}-{export_date.isoformat()}.{extension}"
