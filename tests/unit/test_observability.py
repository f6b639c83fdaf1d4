"""
Unit tests for StructuredLogger.
"""

import json
import logging

from pii_compliance_monitor.models.config import ObservabilityConfig
from pii_compliance_monitor.models.observability import LogLevel, create_log_context
from pii_compliance_monitor.services.observability import JsonFormatter, StructuredLogger


class TestStructuredLogger:
    """Test cases for StructuredLogger."""

    def setup_method(self):
        """Set up test fixtures."""
        self.logger = StructuredLogger(name="test_logger", level=LogLevel.DEBUG)

    def test_recent_logs(self):
        """Test entries are kept for retrieval."""
        self.logger.info("Document ingested", document_count=3)

        entry = self.logger.get_recent_logs()[-1]
        assert entry.message == "Document ingested"
        assert entry.level == LogLevel.INFO
        assert entry.context.metadata == {"document_count": 3}

    def test_level_filtering(self):
        """Test messages below the configured level are dropped."""
        logger = StructuredLogger(name="test_warn_logger", level=LogLevel.WARN)

        logger.info("ignored")
        logger.warn("kept")

        assert [entry.message for entry in logger.get_recent_logs()] == ["kept"]

    def test_thread_context(self):
        """Test the thread context is attached and can be cleared."""
        context = create_log_context(operation="ingest", component="ingestor")
        self.logger.set_context(context)

        self.logger.info("with context")
        assert self.logger.get_recent_logs()[-1].context.correlation_id == context.correlation_id

        self.logger.clear_context()
        assert self.logger.get_context() is None

    def test_kwargs_do_not_mutate_context(self):
        """Test extra fields are merged into a copy of the context."""
        context = create_log_context(operation="analyze")
        self.logger.set_context(context)

        self.logger.info("first", risk_score=0.5)

        assert context.metadata == {}
        self.logger.clear_context()

    def test_error_records_exception(self):
        """Test exceptions are captured with a stack trace."""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            self.logger.error("Failed", exception=e)

        entry = self.logger.get_recent_logs()[-1]
        assert entry.exception == "boom"
        assert "RuntimeError" in entry.stack_trace

    def test_from_config(self):
        """Test construction from configuration."""
        config = ObservabilityConfig(log_level="warn", log_format="text")

        logger = StructuredLogger.from_config(config, name="test_config_logger")

        assert logger.level == LogLevel.WARN
        assert logger.log_format == "text"

    def test_json_output(self, caplog):
        """Test JSON mode emits one JSON object per message."""
        with caplog.at_level(logging.DEBUG, logger="test_logger"):
            self.logger.info("json message", pii_count=2)

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["message"] == "json message"
        assert payload["level"] == "INFO"
        assert payload["metadata"] == {"pii_count": 2}


    def test_close_releases_file_handler(self, tmp_path):
        """Test close flushes the log file and detaches every handler."""
        log_file = tmp_path / "monitor.log"
        logger = StructuredLogger(name="test_file_logger", log_file=str(log_file))
        file_handlers = [h for h in logger._logger.handlers if isinstance(h, logging.FileHandler)]

        logger.info("written before close")
        logger.close()

        assert "written before close" in log_file.read_text(encoding="utf-8")
        assert logger._logger.handlers == []
        assert len(file_handlers) == 1
        assert file_handlers[0].stream is None


class TestJsonFormatter:
    """Test cases for JsonFormatter."""

    def test_plain_record(self):
        """Test plain records are wrapped in JSON."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "plain", None, None)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "plain"
        assert payload["level"] == "INFO"

    def test_json_record_passthrough(self):
        """Test already-serialized messages are not wrapped again."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, '{"a": 1}', None, None)

        assert JsonFormatter().format(record) == '{"a": 1}'
