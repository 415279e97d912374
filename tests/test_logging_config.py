"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch

from thumbnail_pipeline.core.logging_config import (
    ROOT_LOGGER_NAME,
    get_logger,
    resolve_level,
    set_debug,
    setup_logger,
)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_parameters(self):
        """Test setup_logger with default parameters."""
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}):
            test_logger = setup_logger()
        assert test_logger.name == "thumbnail-pipeline"
        assert test_logger.level == logging.INFO
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate

    def test_setup_logger_custom_level_by_parameter(self):
        """Test setup_logger with custom level via parameter."""
        test_logger = setup_logger(name="test-param-level", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        """Test setup_logger with custom level via environment variable."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        """Test setup_logger with invalid level defaults to INFO."""
        test_logger = setup_logger(name="test-invalid-level", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Test setup_logger with structured format."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_FORMAT", None)
            test_logger = setup_logger(name="test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" in format_string
        assert "%(funcName)s" in format_string
        assert "%(threadName)s" in format_string

    def test_setup_logger_env_format_override(self):
        """Test setup_logger format override via environment variable."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="test-env-format", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" not in format_string

    def test_setup_logger_no_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers."""
        test_logger1 = setup_logger(name="test-no-duplicates")
        test_logger2 = setup_logger(name="test-no-duplicates")

        assert test_logger1 is test_logger2
        assert len(test_logger1.handlers) == 1

    def test_setup_logger_handler_uses_stdout(self):
        """Test that logger handler uses stdout."""
        test_logger = setup_logger(name="test-stdout")
        assert test_logger.handlers[0].stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default_name(self):
        assert get_logger().name == ROOT_LOGGER_NAME

    def test_get_logger_nests_child_names(self):
        assert get_logger("handler").name == "thumbnail-pipeline.handler"

    def test_get_logger_keeps_qualified_names(self):
        assert get_logger("thumbnail-pipeline.cli").name == "thumbnail-pipeline.cli"


class TestLevels:
    """Tests for level resolution and debug switching."""

    def test_resolve_level_from_env(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "error"}):
            assert resolve_level() == logging.ERROR

    def test_resolve_level_ignores_non_level_attributes(self):
        assert resolve_level("basicConfig") == logging.INFO

    def test_set_debug_switches_pipeline_loggers(self):
        child = get_logger("debug-switch")
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}):
            set_debug(True)
            assert child.level == logging.DEBUG
            set_debug(False)
            assert child.level == logging.INFO
