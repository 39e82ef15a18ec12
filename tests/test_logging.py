"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from habitlens.config import BaseConfig
from habitlens.devtools import dev_log
from habitlens.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITLENS_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("HABITLENS_TIMEZONE", raising=False)
    monkeypatch.delenv("HABITLENS_WEEK_START", raising=False)
    return BaseConfig()


@pytest.fixture
def configured_logger(config):
    logger = setup_logging(config)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="habitlens.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Completion toggled",
        args=(),
        exc_info=None,
    )
    record.funcName = "toggle_completion"
    record.habit_id = "abc"
    record.day_key = "2024-01-03"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "habitlens.test"
    assert log_data["message"] == "Completion toggled"
    assert log_data["function"] == "toggle_completion"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"habit_id": "abc", "day_key": "2024-01-03"}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="habitlens.test",
        level=logging.ERROR,
        pathname="test.py",
        lineno=7,
        msg="Error occurred",
        args=(),
        exc_info=exc_info,
    )
    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_setup_logging_writes_json_file(config, configured_logger):
    get_logger("tests").info("hello", extra={"habit_id": "h1"})
    for handler in configured_logger.handlers:
        handler.flush()

    log_file = config.DATA_DIR / "logs" / "habitlens.log"
    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["message"] == "hello"
    assert lines[-1]["logger"] == "habitlens.tests"
    assert lines[-1]["extra"]["habit_id"] == "h1"


def test_setup_logging_is_idempotent(config, configured_logger):
    again = setup_logging(config)
    assert again is configured_logger
    assert len(again.handlers) == 2


def test_get_logger_namespace():
    assert get_logger("services.tracker").name == "habitlens.services.tracker"


def test_dev_log_emits_context_in_dev_mode(config, caplog):
    config.DEV_MODE = True
    with caplog.at_level(logging.INFO, logger="habitlens"):
        dev_log(config, "Habit update failed", exc=ValueError("boom"), context={"habit_id": "h1"})

    (record,) = [r for r in caplog.records if r.name == "habitlens.dev"]
    assert record.getMessage() == "[DEV] Habit update failed (habit_id=h1)"
    assert record.dev_context == {"habit_id": "h1"}
    assert record.exc_info[0] is ValueError


def test_dev_log_silent_outside_dev_mode(config, caplog):
    config.DEV_MODE = False
    with caplog.at_level(logging.DEBUG, logger="habitlens"):
        dev_log(config, "Ignored")
        dev_log(None, "Ignored")

    assert not [r for r in caplog.records if r.name == "habitlens.dev"]
