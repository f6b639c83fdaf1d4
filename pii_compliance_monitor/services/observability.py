"""
Structured logging with JSON output and context propagation.
"""

import json
import logging
import os
import threading
import traceback
from collections import deque
from datetime import datetime
from typing import List, Optional

from ..models.config import ObservabilityConfig
from ..models.observability import LogLevel, LogContext, LogEntry, create_log_context

_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
    LogLevel.FATAL: 4
}


class StructuredLogger:
    """Structured logger with JSON output and context propagation."""

    def __init__(
        self,
        name: str = "pii_compliance_monitor",
        level: LogLevel = LogLevel.INFO,
        log_format: str = "json",
        log_file: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            level: Log level
            log_format: Log format ("json" or "text")
            log_file: Optional log file path
        """
        self.name = name
        self.level = level
        self.log_format = log_format
        self.log_file = log_file

        # Thread-local storage for context
        self._local = threading.local()

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.value))
        self._logger.handlers.clear()
        self._setup_handlers()

        # Recent entries kept for retrieval
        self._log_entries: deque = deque(maxlen=1000)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ObservabilityConfig, name: str = "pii_compliance_monitor") -> "StructuredLogger":
        """Create a logger from observability configuration."""
        return cls(
            name=name,
            level=LogLevel(config.log_level.upper()),
            log_format=config.log_format,
            log_file=config.log_file
        )

    def _setup_handlers(self) -> None:
        """Setup log handlers."""
        console_handler = logging.StreamHandler()
        self._logger.addHandler(console_handler)

        if self.log_file:
            self._logger.addHandler(logging.FileHandler(self.log_file))

        if self.log_format == "json":
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        for handler in self._logger.handlers:
            handler.setLevel(getattr(logging, self.level.value))
            handler.setFormatter(formatter)

    def set_context(self, context: LogContext) -> None:
        """Set logging context for current thread."""
        self._local.context = context

    def get_context(self) -> Optional[LogContext]:
        """Get logging context for current thread."""
        return getattr(self._local, 'context', None)

    def clear_context(self) -> None:
        """Clear logging context for current thread."""
        if hasattr(self._local, 'context'):
            delattr(self._local, 'context')

    def log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        exception: Optional[Exception] = None,
        **kwargs
    ) -> None:
        """
        Log a structured message.

        Args:
            level: Log level
            message: Log message
            context: Optional log context (uses thread-local if not provided)
            exception: Optional exception to log
            **kwargs: Additional context data
        """
        if _LEVEL_ORDER[level] < _LEVEL_ORDER[self.level]:
            return

        if context is None:
            context = self.get_context()

        if context is None:
            context = create_log_context()

        if kwargs:
            context = LogContext(
                correlation_id=context.correlation_id,
                operation=context.operation,
                component=context.component,
                document_id=context.document_id,
                metadata={**context.metadata, **kwargs}
            )

        log_entry = LogEntry(
            timestamp=datetime.utcnow(),
            level=level,
            message=message,
            context=context,
            logger_name=self.name,
            thread_id=str(threading.get_ident()),
            process_id=str(os.getpid()),
            exception=str(exception) if exception else None,
            stack_trace=self._get_stack_trace(exception) if exception else None
        )

        with self._lock:
            self._log_entries.append(log_entry)

        python_level = getattr(logging, level.value)

        if self.log_format == "json":
            self._logger.log(python_level, json.dumps(log_entry.to_dict(), default=str))
        else:
            self._logger.log(python_level, self._format_text_message(log_entry))

    def _get_stack_trace(self, exception: Exception) -> str:
        """Get stack trace from exception."""
        return ''.join(traceback.format_exception(
            type(exception), exception, exception.__traceback__
        ))

    def _format_text_message(self, log_entry: LogEntry) -> str:
        """Format log entry for text output."""
        parts = [log_entry.message]

        if log_entry.context.correlation_id:
            parts.append(f"correlation_id={log_entry.context.correlation_id}")

        if log_entry.context.operation:
            parts.append(f"operation={log_entry.context.operation}")

        if log_entry.context.document_id:
            parts.append(f"document_id={log_entry.context.document_id}")

        for key, value in log_entry.context.metadata.items():
            parts.append(f"{key}={value}")

        if log_entry.exception:
            parts.append(f"exception={log_entry.exception}")

        return " | ".join(parts)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, message, **kwargs)

    def warn(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.log(LogLevel.WARN, message, **kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, message, exception=exception, **kwargs)

    def fatal(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        """Log fatal message."""
        self.log(LogLevel.FATAL, message, exception=exception, **kwargs)

    def get_recent_logs(self, limit: int = 100) -> List[LogEntry]:
        """Get recent log entries."""
        with self._lock:
            return list(self._log_entries)[-limit:]

    def close(self) -> None:
        """Flush and release every handler, including the log file."""
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)


class JsonFormatter(logging.Formatter):
    """JSON formatter for records that were not produced by StructuredLogger."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        message = record.getMessage()
        if message.startswith('{'):
            return message

        return json.dumps({
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "message": message,
            "logger": record.name,
            "thread_id": str(threading.get_ident()),
            "process_id": str(os.getpid())
        })
