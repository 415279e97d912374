"""Unit tests for structured logging and metrics."""

import logging
import time
from unittest.mock import patch

from thumbnail_pipeline.core.observability import (
    LogContext,
    MetricsCollector,
    PerformanceMetrics,
    StructuredLogger,
)


class TestLogContext:
    """Tests for LogContext."""

    def test_derived_contexts_keep_correlation_id(self):
        context = LogContext(operation="generate_thumbnails").with_metadata(source_url="s3://u/a.jpg")

        derived = context.with_operation("process_size").with_metadata(width=300)

        assert derived.correlation_id == context.correlation_id
        assert derived.operation == "process_size"
        assert derived.metadata == {"source_url": "s3://u/a.jpg", "width": 300}
        assert context.metadata == {"source_url": "s3://u/a.jpg"}


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_message_carries_context_and_fields(self):
        logger = StructuredLogger("services")
        context = LogContext(correlation_id="abc", operation="process_size").with_metadata(width=300)

        with patch.object(logger._logger, "log") as mock_log:
            logger.info("Derivative uploaded", context, dest_path="w300/a.jpg")

        mock_log.assert_called_once_with(
            logging.INFO,
            "[process_size] [abc] Derivative uploaded (width=300, dest_path=w300/a.jpg)",
            exc_info=False,
        )

    def test_message_without_context(self):
        logger = StructuredLogger("services")

        with patch.object(logger._logger, "log") as mock_log:
            logger.warning("Nothing to do")

        mock_log.assert_called_once_with(logging.WARNING, "Nothing to do", exc_info=False)

    def test_name_is_nested_under_root_logger(self):
        assert StructuredLogger("handler").name == "thumbnail-pipeline.handler"

    def test_error_can_attach_traceback(self):
        logger = StructuredLogger("services")

        with patch.object(logger._logger, "log") as mock_log:
            logger.error("Derivative failed", exc_info=True, error="reset")

        mock_log.assert_called_once_with(
            logging.ERROR, "Derivative failed (error=reset)", exc_info=True
        )


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_summary(self):
        collector = MetricsCollector()
        collector.record_metric(PerformanceMetrics("process_size", 0.0, 0.5, True))
        collector.record_metric(PerformanceMetrics("process_size", 0.0, 1.5, False, "boom"))
        collector.record("decode_source", time.time(), True)

        summary = collector.get_summary("process_size")

        assert summary["total_operations"] == 2
        assert summary["failed_operations"] == 1
        assert summary["success_rate"] == 0.5
        assert summary["max_duration"] == 1.5
        assert len(collector.get_metrics()) == 3

    def test_record_keeps_metadata(self):
        collector = MetricsCollector()

        metric = collector.record("process_size", time.time(), False, "boom", width=300)

        assert metric.metadata == {"width": 300}
        assert metric.duration_ms >= 0

    def test_clear(self):
        collector = MetricsCollector()
        collector.record("process_size", time.time(), True)

        collector.clear_metrics()

        assert collector.get_summary() == {}
