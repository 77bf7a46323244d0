"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from datetime import date

import pytest

from dayplanner.config import TestConfig
from dayplanner.logging_config import ROOT_LOGGER_NAME, JSONFormatter, get_logger, setup_logging
from dayplanner.services.habits import toggle_habit_completion


@pytest.fixture(autouse=True)
def _reset_dayplanner_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
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
    """JSONFormatter emits the core record fields."""
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


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.habit_id = 7
    record.day = date(2024, 3, 10)

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7, "day": "2024-03-10"}


def test_setup_logging(tmp_path):
    """Logging setup creates the rotating JSON log file."""
    config = TestConfig(tmp_path)

    logger = setup_logging(config)

    assert logger.name == "dayplanner"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "dayplanner.log"
    assert log_file.exists()

    logger.warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    assert len(lines) >= 2
    for line in lines:
        entry = json.loads(line)
        assert {"timestamp", "level", "message"} <= entry.keys()


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path):
    config = TestConfig(tmp_path)
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    """get_logger nests names under the dayplanner namespace."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")

    assert logger1.name == "dayplanner.module1"
    assert logger2.name == "dayplanner.module2"
    assert logger1 != logger2
    assert get_logger("dayplanner.services").name == "dayplanner.services"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console logging level follows dev mode."""
    config = TestConfig(tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level


def test_service_logs_reach_the_file(tmp_path, habit_repo, habit_factory, user):
    config = TestConfig(tmp_path / "data")
    logger = setup_logging(config)
    habit = habit_factory()

    toggle_habit_completion(habit_repo, user.id, habit.id, date(2024, 3, 10))
    for handler in logger.handlers:
        handler.flush()

    entries = [
        json.loads(line)
        for line in (tmp_path / "data" / "logs" / "dayplanner.log").read_text().splitlines()
        if line.strip()
    ]
    toggles = [e for e in entries if e["logger"] == "dayplanner.services.habits"]
    assert toggles
    assert toggles[-1]["extra"]["habit_id"] == habit.id
    assert toggles[-1]["extra"]["current_streak"] == 1
