"""Logging configuration for the page ingestion service."""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional

from page_ingestion.config import get_settings

# Page ID context variable for tracking a page across async operations
document_id_var: ContextVar[Optional[str]] = ContextVar("document_id", default=None)

# Logger instance
_logger: Optional[logging.Logger] = None

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
    "extra_fields",
    "document_id",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        document_id = document_id_var.get()
        if document_id:
            log_data["document_id"] = document_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Standard formatter for development (human-readable)."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - [%(document_id)s] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with the current page id."""
        if not hasattr(record, "document_id"):
            record.document_id = document_id_var.get() or "N/A"
        return super().format(record)


def setup_logging() -> logging.Logger:
    """Set up logging configuration based on environment."""
    global _logger

    if _logger is not None:
        return _logger

    settings = get_settings()

    logger = logging.getLogger("page_ingestion")
    logger.setLevel(getattr(logging, settings.log_level))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings.log_level))
    if settings.is_production:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(StandardFormatter())
    logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.INFO if settings.debug else logging.WARNING)

    logger.propagate = False

    _logger = logger
    logger.info(
        f"Logging configured: level={settings.log_level}, "
        f"environment={settings.environment.value}, "
        f"format={'JSON' if settings.is_production else 'Standard'}"
    )
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance."""
    if name:
        return logging.getLogger(f"page_ingestion.{name}")
    return logging.getLogger("page_ingestion")


def set_document_id(document_id: Optional[str]) -> None:
    """Set the page id for the current context."""
    document_id_var.set(document_id)


def get_document_id() -> Optional[str]:
    """Get the page id for the current context."""
    return document_id_var.get()


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> None:
    """Log an error with context."""
    logger = get_logger("error")
    extra_fields = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context or {},
        "document_id": get_document_id(),
        **kwargs,
    }
    logger.error(
        f"Error: {type(error).__name__}: {str(error)}",
        exc_info=error,
        extra={"extra_fields": extra_fields},
    )
