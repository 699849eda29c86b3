"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from habitstreak.config import BaseConfig
from habitstreak.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_habitstreak_logger():
    yield
    logger = logging.getLogger("habitstreak")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _record(level=logging.INFO, msg="Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits one object with the standard fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_keeps_extra_fields():
    record = _record()
    record.habit_id = "abc123"
    record.gap_days = 3

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": "abc123", "gap_days": 3}


def test_setup_logging(tmp_path):
    """Logging setup creates the JSON log file under the data directory."""
    config = BaseConfig()
    config.DATA_DIR = str(tmp_path)
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "habitstreak"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habitstreak.log"
    assert log_file.exists()

    get_logger("services.habits").warning("Streak reset", extra={"habit_id": "h1"})
    for handler in logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["logger"] == "habitstreak.services.habits"
    assert lines[-1]["extra"]["habit_id"] == "h1"


def test_setup_logging_is_idempotent(tmp_path):
    config = BaseConfig()
    config.DATA_DIR = str(tmp_path)
    config.DEV_MODE = False

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2
    console = next(h for h in logger.handlers if type(h) is logging.StreamHandler)
    assert console.level == logging.WARNING


def test_get_logger():
    logger = get_logger("test_module")

    assert logger.name == "habitstreak.test_module"
    assert isinstance(logger, logging.Logger)
