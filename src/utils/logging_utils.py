"""Structured logging setup for the report exporter."""

from __future__ import annotations

import json
import logging
import os
from logging import Handler
from pathlib import Path
from typing import Optional

from .env import is_dev_mode


PROJECT_ROOT = Path(__file__).resolve().parents[2]
LOG_DIR = PROJECT_ROOT / "data" / "logs"
DEFAULT_LOG_FILE = LOG_DIR / "plant_debugger.log"
LOG_FILE_ENV = "PLANTDBG_LOG_FILE"

_CONFIGURED = False


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON, carrying any ``extra`` fields."""

    _BASE_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self._BASE_FIELDS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def _build_handlers(log_file: Path) -> list[Handler]:
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    return [file_handler, console_handler]


def get_log_file_path() -> Path:
    """Return the log file used when ``setup_logging`` gets no explicit path."""
    override = os.environ.get(LOG_FILE_ENV)
    return Path(override) if override else DEFAULT_LOG_FILE


def setup_logging(level: Optional[int] = None, log_file: Optional[Path] = None) -> Path:
    """Configure root logging once and return the log file path.

    Level defaults to DEBUG in dev mode and INFO otherwise.
    """

    global _CONFIGURED

    target_log_file = Path(log_file) if log_file is not None else get_log_file_path()
    if _CONFIGURED:
        return target_log_file

    if level is None:
        level = logging.DEBUG if is_dev_mode() else logging.INFO

    target_log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    for handler in _build_handlers(target_log_file):
        root_logger.addHandler(handler)

    _CONFIGURED = True
    return target_log_file
