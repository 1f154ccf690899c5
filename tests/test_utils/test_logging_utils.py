"""
Tests for the logging utilities.
"""

import logging
import logging.handlers
from datetime import datetime, timezone

import pytest
import structlog
from structlog.testing import capture_logs

from src.utils.logging import ExecutionLogContext, get_execution_logger, setup_logging


@pytest.fixture
def clean_logging_state():
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level
    root_logger.handlers.clear()

    yield root_logger

    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestSetupLogging:
    def test_console_only(self, clean_logging_state):
        setup_logging(log_level="DEBUG", log_to_file=False)

        assert clean_logging_state.level == logging.DEBUG
        assert len(clean_logging_state.handlers) == 1
        assert isinstance(clean_logging_state.handlers[0], logging.StreamHandler)

    def test_file_handlers(self, clean_logging_state, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        setup_logging(log_level="WARNING", log_to_file=True)

        rotating = [
            h
            for h in clean_logging_state.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(rotating) == 2
        assert {h.level for h in rotating} == {logging.INFO, logging.ERROR}
        assert (tmp_path / "logs").is_dir()

    def test_invalid_level_raises(self, clean_logging_state):
        with pytest.raises(AttributeError):
            setup_logging(log_level="LOUD", log_to_file=False)


class TestExecutionLogContext:
    def test_binds_identity_inside_block(self, clean_logging_state):
        due = datetime(2026, 3, 4, 14, 30, tzinfo=timezone.utc)

        with ExecutionLogContext("u1", "r1", due):
            bound = structlog.contextvars.get_contextvars()
            assert bound == {
                "user_id": "u1",
                "reminder_id": "r1",
                "scheduled_for": "2026-03-04T14:30:00+00:00",
            }

        assert structlog.contextvars.get_contextvars() == {}

    def test_restores_outer_bindings(self, clean_logging_state):
        structlog.contextvars.bind_contextvars(user_id="outer")

        with ExecutionLogContext("u2", "r2", None):
            assert structlog.contextvars.get_contextvars()["scheduled_for"] is None

        assert structlog.contextvars.get_contextvars() == {"user_id": "outer"}

    def test_exception_propagates_and_unbinds(self, clean_logging_state):
        with pytest.raises(ValueError):
            with ExecutionLogContext("u1", "r1", None):
                raise ValueError("bad schedule")

        assert structlog.contextvars.get_contextvars() == {}

    def test_error_is_logged(self, clean_logging_state):
        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                with ExecutionLogContext("u1", "r1", None):
                    raise RuntimeError("store down")

        failed = [entry for entry in logs if entry["log_level"] == "error"]
        assert failed[0]["event"] == "Reminder execution failed"
        assert failed[0]["error_type"] == "RuntimeError"
        assert failed[0]["error"] == "store down"


def test_get_execution_logger_is_bindable():
    logger = get_execution_logger("engine")
    assert hasattr(logger, "bind")
