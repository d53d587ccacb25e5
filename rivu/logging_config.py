"""Structured logging configuration for Rivu."""

import json
import logging
import sys
from datetime import UTC, datetime

# Extra record attributes copied into the JSON payload when present.
_CONTEXT_FIELDS = (
    "execution_id",
    "component",
    "channel_title",
    "field_name",
    "items_count",
    "output_length",
    "duration_seconds",
    "reason",
    "success",
    "indent",
    "xml_declaration",
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in _CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger:
    """Logger with execution context and structured logging."""

    def __init__(self, execution_id: str, component: str = "main"):
        """Initialize execution logger.

        Args:
            execution_id: Unique identifier for this execution
            component: Component name (e.g., 'serializer', 'config')
        """
        self.execution_id = execution_id
        self.component = component
        self.logger = logging.getLogger(f"rivu.{component}")

    def _log_with_context(self, level: int, message: str, **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        extra = {
            "execution_id": self.execution_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def log_execution_start(self, **kwargs) -> datetime:
        """Log execution start and return its timestamp for log_execution_end."""
        start_time = datetime.now(UTC)
        self.debug(f"Starting {self.component} execution", **kwargs)
        return start_time

    def log_execution_end(
        self, start_time: datetime, success: bool = True, **kwargs
    ) -> None:
        """Log execution end with duration since ``start_time``."""
        duration_seconds = (datetime.now(UTC) - start_time).total_seconds()

        self.debug(
            f"Completed {self.component} execution",
            duration_seconds=duration_seconds,
            success=success,
            **kwargs,
        )

    def log_field_skipped(self, field_name: str, reason: str) -> None:
        """Log a channel or item field left out of the output."""
        self.debug(
            f"Skipped field {field_name}: {reason}",
            field_name=field_name,
            reason=reason,
        )


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for an application embedding Rivu.

    The library itself never calls this; it only emits records under the
    ``rivu`` logger namespace.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    for logger_name in ("rivu", "rivu.serializer", "rivu.config"):
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
