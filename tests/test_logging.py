"""
Tests for structured logging throughout the unsubscribe pipeline.
"""

import json
import logging
from io import StringIO
from unittest.mock import patch

import pytest

from unsubscriber.email_processor.unsubscribe.logging import (
    UnsubscribeLogger, SensitiveDataFilter, configure_unsubscribe_logging, LOGGER_ROOT
)
from unsubscriber.email_processor.unsubscribe.exceptions import ExtractionError


def logged_payload(mock_method):
    return json.loads(mock_method.call_args[0][0])


class TestStructuredLogging:
    """JSON records with component and context."""

    def test_logger_creation(self):
        logger = UnsubscribeLogger("link_extractor")

        assert logger.logger.name == "unsubscriber.link_extractor"
        assert logger.component == "link_extractor"
        assert logger.context == {}

    def test_structured_log_output_format(self):
        log_capture = StringIO()
        handler = logging.StreamHandler(log_capture)
        logger = UnsubscribeLogger("ladder_output")
        logger.logger.addHandler(handler)
        logger.logger.setLevel(logging.INFO)

        try:
            logger.add_context("email_id", "msg-1")
            logger.info("Attempt finished", {"method": "http_get", "success": True})
        finally:
            logger.logger.removeHandler(handler)

        record = json.loads(log_capture.getvalue())
        assert record['message'] == "Attempt finished"
        assert record['component'] == "ladder_output"
        assert record['context'] == {"email_id": "msg-1"}
        assert record['extra'] == {"method": "http_get", "success": True}

    def test_log_levels_and_methods(self):
        logger = UnsubscribeLogger("validator")

        for level in ('debug', 'info', 'warning', 'error'):
            with patch.object(logger.logger, level) as mock_method:
                getattr(logger, level)(f"{level} message", {"test": "data"})
                mock_method.assert_called_once()
                assert logged_payload(mock_method)['message'] == f"{level} message"

    def test_time_operation(self):
        logger = UnsubscribeLogger("engine")

        with patch.object(logger.logger, 'info') as mock_info:
            with logger.time_operation("extraction"):
                pass

        payload = logged_payload(mock_info)
        assert payload['message'] == "Operation extraction completed"
        assert 'duration_seconds' in payload['extra']

    def test_time_operation_reraises(self):
        logger = UnsubscribeLogger("engine")

        with patch.object(logger.logger, 'error') as mock_error:
            with pytest.raises(ValueError):
                with logger.time_operation("extraction"):
                    raise ValueError("bad input")

        assert logged_payload(mock_error)['extra']['error'] == "bad input"

    def test_log_exception_includes_context(self):
        logger = UnsubscribeLogger("link_extractor")

        with patch.object(logger.logger, 'error') as mock_error:
            try:
                raise ExtractionError("HTML parse failed", {"source": "html"})
            except ExtractionError as e:
                logger.log_exception(e, {"email_id": "msg-1"})

        payload = logged_payload(mock_error)
        assert payload['exception']['type'] == 'ExtractionError'
        assert payload['exception']['context'] == {"source": "html"}
        assert mock_error.call_args[1]['exc_info'] is True

    def test_scoped_context(self):
        logger = UnsubscribeLogger("engine")
        logger.add_context("run_id", 7)

        with logger.scoped_context({"email_id": "msg-1"}):
            with patch.object(logger.logger, 'info') as mock_info:
                logger.info("Processing in scope")
            assert logged_payload(mock_info)['context'] == {"run_id": 7, "email_id": "msg-1"}

        assert logger.context == {"run_id": 7}


class TestSensitiveDataFilter:
    """Recipient tokens and credentials never reach the log."""

    def test_url_tokens_are_masked(self):
        logger = UnsubscribeLogger("validator")

        with patch.object(logger.logger, 'info') as mock_info:
            logger.info("Processing request", {
                "url": "https://shop.example/unsubscribe?token=secret123&list=weekly",
                "password": "secret_password",
                "api_key": "key_12345"
            })

        call_args = str(mock_info.call_args)
        assert "secret123" not in call_args
        assert "secret_password" not in call_args
        assert "key_12345" not in call_args
        assert "list=weekly" in call_args

    def test_nested_values_are_filtered(self):
        data_filter = SensitiveDataFilter()

        filtered = data_filter.filter_dict({
            "candidates": ["https://a.example/u?uid=42", "https://b.example/u?sig=abc"],
            "nested": {"token": "abc"}
        })

        assert filtered["candidates"] == ["https://a.example/u?uid=***", "https://b.example/u?sig=***"]
        assert filtered["nested"] == {"token": "***"}


class TestConfigureLogging:
    def test_configures_package_logger(self, tmp_path):
        log_file = tmp_path / "unsubscriber.log"
        root = logging.getLogger(LOGGER_ROOT)
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            logger = configure_unsubscribe_logging(level="DEBUG", output="file", filename=str(log_file))
            UnsubscribeLogger("engine").debug("hello")
            for handler in logger.handlers:
                handler.flush()

            assert logger.name == LOGGER_ROOT
            assert logger.level == logging.DEBUG
            assert json.loads(log_file.read_text().strip())['message'] == "hello"
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
