"""
Unit tests for logging configuration.

Tests structured JSON logging, the text formatter, file rotation setup and
the logging helpers used by the driver and the token cache.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from harness.core.logging_config import (
    ContextAdapter,
    StructuredFormatter,
    TextFormatter,
    get_logger,
    log_driver_call,
    log_performance,
    setup_logging,
    timed,
)


def _record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test.component",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestStructuredFormatter:
    """Test cases for StructuredFormatter."""

    def test_format_basic_log_record(self):
        formatter = StructuredFormatter("test-run-123")

        log_data = json.loads(formatter.format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test.component"
        assert log_data["run_id"] == "test-run-123"
        assert log_data["message"] == "Test message"
        assert log_data["timestamp"].endswith("+00:00")
        assert "metadata" not in log_data

    def test_format_with_metadata(self):
        formatter = StructuredFormatter("test-run-123")
        record = _record("Screenshot saved", logging.ERROR)
        record.metadata = {"test_name": "MyTest-testFoo", "file_size": 2048}

        log_data = json.loads(formatter.format(record))

        assert log_data["metadata"]["test_name"] == "MyTest-testFoo"
        assert log_data["metadata"]["file_size"] == 2048

    def test_format_with_exception(self):
        formatter = StructuredFormatter("test-run-123")

        try:
            raise ValueError("Test exception")
        except ValueError:
            import sys

            record = _record("Exception occurred", logging.ERROR, sys.exc_info())

        log_data = json.loads(formatter.format(record))

        assert "ValueError: Test exception" in log_data["exception"]

    def test_record_run_id_overrides_default(self):
        formatter = StructuredFormatter("test-run-123")
        record = _record("Test completed")
        record.run_id = "suite-run-7"

        log_data = json.loads(formatter.format(record))

        assert log_data["run_id"] == "suite-run-7"


class TestTextFormatter:
    """Test cases for TextFormatter."""

    def test_format_includes_metadata(self):
        formatter = TextFormatter("abcdef123456")
        record = _record("Driver call")
        record.metadata = {"method": "click", "success": True}

        formatted = formatter.format(record)

        assert "INFO" in formatted
        assert "[abcdef12] test.component: Driver call" in formatted
        assert formatted.endswith("| method=click success=True")

    def test_format_appends_traceback(self):
        formatter = TextFormatter("abcdef123456")

        try:
            raise RuntimeError("browser crashed")
        except RuntimeError:
            import sys

            record = _record("Capture failed", logging.ERROR, sys.exc_info())

        lines = formatter.format(record).splitlines()

        assert "Capture failed" in lines[0]
        assert lines[-1] == "RuntimeError: browser crashed"


def _harness_handlers(root_logger):
    return [
        h
        for h in root_logger.handlers
        if isinstance(h.formatter, (TextFormatter, StructuredFormatter))
    ]


class TestLoggingSetup:
    """Test cases for logging setup functions."""

    def test_setup_logging_development_mode(self, temp_config, restore_root_logger):
        temp_config.log_level = "DEBUG"

        root_logger = setup_logging(temp_config, "test-run-123")

        handlers = _harness_handlers(root_logger)
        assert root_logger.level == logging.DEBUG
        assert len(handlers) == 2
        assert isinstance(handlers[0].formatter, TextFormatter)

        logging.getLogger("test").info("Test message")
        assert temp_config.get_log_file_path().exists()

    def test_setup_logging_ci_mode(self, temp_config, restore_root_logger):
        temp_config.ci_mode = True
        temp_config.log_format = "json"

        root_logger = setup_logging(temp_config, "test-run-123")

        handlers = _harness_handlers(root_logger)
        assert root_logger.level == logging.INFO
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, StructuredFormatter)

    def test_setup_logging_twice_replaces_its_handlers(self, temp_config, restore_root_logger):
        temp_config.ci_mode = True
        other_handler = logging.NullHandler()
        restore_root_logger.addHandler(other_handler)
        try:
            setup_logging(temp_config, "first-run")
            root_logger = setup_logging(temp_config, "second-run")

            handlers = _harness_handlers(root_logger)
            assert len(handlers) == 1
            assert handlers[0].formatter.run_id == "second-run"
            assert other_handler in root_logger.handlers
        finally:
            restore_root_logger.removeHandler(other_handler)

    def test_get_logger(self):
        logger = get_logger("test.component")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.component"

    def test_get_logger_with_context(self):
        logger = get_logger("test.component", run_id="run-42")

        assert isinstance(logger, ContextAdapter)
        msg, kwargs = logger.process("hello", {"extra": {"metadata": {}}})
        assert kwargs["extra"]["run_id"] == "run-42"
        assert kwargs["extra"]["metadata"] == {}


class TestLoggingHelpers:
    """Test cases for the performance and driver logging helpers."""

    def test_log_performance(self):
        logger = MagicMock()

        log_performance(logger, "recache", 1.5, test_count=3)

        message = logger.info.call_args[0][0]
        metadata = logger.info.call_args[1]["extra"]["metadata"]
        assert "recache completed in 1.50s" in message
        assert metadata["duration"] == 1.5
        assert metadata["test_count"] == 3

    def test_log_driver_call_success_is_debug(self):
        logger = MagicMock()

        log_driver_call(logger, "click", 0.01, True, locator="#save")

        level, message = logger.log.call_args[0]
        assert level == logging.DEBUG
        assert "Driver call: click success" in message
        assert logger.log.call_args[1]["extra"]["metadata"]["locator"] == "#save"

    def test_log_driver_call_failure_is_warning(self):
        logger = MagicMock()

        log_driver_call(logger, "navigate", 2.0, False, error="net::ERR")

        level, message = logger.log.call_args[0]
        assert level == logging.WARNING
        assert "failed" in message

    def test_timed_decorator(self):
        with patch("harness.core.logging_config.get_logger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            @timed("add_numbers")
            def add(x, y):
                return x + y

            assert add(2, 3) == 5

            call_args = mock_logger.info.call_args
            assert "add_numbers completed" in call_args[0][0]
            assert call_args[1]["extra"]["metadata"]["success"] is True

    def test_timed_decorator_with_exception(self):
        mock_logger = MagicMock()

        @timed("failing_operation", logger=mock_logger)
        def failing():
            raise ValueError("Test error")

        with pytest.raises(ValueError):
            failing()

        call_args = mock_logger.error.call_args
        assert "failing_operation failed" in call_args[0][0]
        assert call_args[1]["extra"]["metadata"]["error"] == "Test error"
        mock_logger.info.assert_not_called()
