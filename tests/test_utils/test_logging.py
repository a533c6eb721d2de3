"""Tests for logging configuration."""

import json
import logging
from contextvars import copy_context
from unittest.mock import MagicMock, patch

from page_ingestion.utils import logging as ingestion_logging
from page_ingestion.utils.logging import (
    JSONFormatter,
    StandardFormatter,
    get_document_id,
    get_logger,
    log_error,
    set_document_id,
    setup_logging,
)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("page_ingestion.test", logging.INFO, __file__, 10, message, None, None)


def test_get_logger():
    logger = get_logger("test")

    assert isinstance(logger, logging.Logger)
    assert logger.name == "page_ingestion.test"
    assert get_logger().name == "page_ingestion"


def test_setup_logging(monkeypatch, reset_settings):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setattr(ingestion_logging, "_logger", None)

    setup_logging()

    logger = logging.getLogger("page_ingestion")
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, StandardFormatter)
    assert setup_logging() is logger


def test_json_formatter_includes_document_id():
    set_document_id("page-42")
    try:
        record = _record()
        record.extra_fields = {"chunks": 3}
        payload = json.loads(JSONFormatter().format(record))
    finally:
        set_document_id(None)

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["document_id"] == "page-42"
    assert payload["chunks"] == 3


def test_standard_formatter_without_document_id():
    assert get_document_id() is None
    assert "[N/A]" in StandardFormatter().format(_record())


def test_log_error_records_current_document_id():
    error_logger = MagicMock()

    def run():
        set_document_id("page-7")
        log_error(ValueError("bad body"), context={"page_id": "page-7"})

    with patch.object(ingestion_logging, "get_logger", return_value=error_logger):
        copy_context().run(run)

    extra_fields = error_logger.error.call_args.kwargs["extra"]["extra_fields"]
    assert extra_fields["document_id"] == "page-7"
    assert extra_fields["error_type"] == "ValueError"
    assert extra_fields["context"] == {"page_id": "page-7"}
    assert get_document_id() is None
