"""Tests for structured logging utilities."""

from __future__ import annotations

import json
import logging

import pytest

from utils import logging_utils


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(logging_utils, "_CONFIGURED", False)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_writes_json(tmp_path, fresh_logging):
    log_file = tmp_path / "structured.log"

    configured = logging_utils.setup_logging(log_file=log_file)
    assert configured == log_file

    logging.getLogger("tests.logging").info("hello world", extra={"event": "report.export", "page_count": 3})

    contents = log_file.read_text().strip().splitlines()
    assert contents
    payload = json.loads(contents[-1])
    assert payload["message"] == "hello world"
    assert payload["event"] == "report.export"
    assert payload["page_count"] == 3
    assert payload["level"] == "INFO"


def test_setup_logging_runs_once(tmp_path, fresh_logging):
    first = tmp_path / "first.log"
    logging_utils.setup_logging(log_file=first)
    handler_count = len(logging.getLogger().handlers)

    logging_utils.setup_logging(log_file=tmp_path / "second.log")

    assert len(logging.getLogger().handlers) == handler_count
    assert not (tmp_path / "second.log").exists()


def test_explicit_level_wins(tmp_path, fresh_logging):
    logging_utils.setup_logging(level=logging.WARNING, log_file=tmp_path / "x.log")
    assert logging.getLogger().level == logging.WARNING


def test_log_file_env_override(tmp_path, monkeypatch):
    override = tmp_path / "custom.log"
    monkeypatch.setenv(logging_utils.LOG_FILE_ENV, str(override))
    assert logging_utils.get_log_file_path() == override


def test_default_log_file(monkeypatch):
    monkeypatch.delenv(logging_utils.LOG_FILE_ENV, raising=False)
    assert logging_utils.get_log_file_path() == logging_utils.DEFAULT_LOG_FILE


def test_formatter_includes_traceback():
    formatter = logging_utils.StructuredFormatter()
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(formatter.format(record))
    assert payload["message"] == "failed"
    assert "ValueError: boom" in payload["exc_info"]
