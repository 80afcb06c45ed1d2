"""Tests for structured logging module."""

import json
import logging
import uuid
from io import StringIO

import pytest

import kblifecycle.logging.structured_logger as structured_logger
from kblifecycle.logging.structured_logger import (
    JSONFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
    is_json_logging,
)


@pytest.fixture
def reset_logging():
    """Reset logging configuration after each test."""
    original_logger_class = logging.getLoggerClass()
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.setLoggerClass(original_logger_class)
    logging.root.handlers = original_handlers
    logging.root.setLevel(original_level)
    structured_logger._use_json_format = False


@pytest.fixture
def json_logger():
    """StructuredLogger with a unique name writing JSON to a StringIO stream."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())

    logger = get_logger(f"test.structured.{uuid.uuid4().hex[:8]}")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    yield stream, logger

    logger.handlers = []


def read_one(stream: StringIO) -> dict:
    return json.loads(stream.getvalue().strip())


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_standard_fields(self, json_logger):
        stream, logger = json_logger

        logger.warning("Deprecated config found")
        log_data = read_one(stream)

        assert log_data["level"] == "WARNING"
        assert log_data["message"] == "Deprecated config found"
        assert log_data["logger"] == logger.name
        for key in ("timestamp", "module", "function", "line"):
            assert key in log_data

    def test_extra_context(self, json_logger):
        stream, logger = json_logger

        logger.info("Backfilled", extra={"context": {"added": 3}})

        assert read_one(stream)["context"] == {"added": 3}

    def test_non_serializable_context(self, json_logger, tmp_path):
        stream, logger = json_logger

        logger.info_ctx("Wrote config", path=tmp_path)

        assert read_one(stream)["context"]["path"] == str(tmp_path)

    def test_exception(self, json_logger):
        stream, logger = json_logger

        try:
            raise ValueError("bad yaml")
        except ValueError:
            logger.error("Load failed", exc_info=True)

        log_data = read_one(stream)
        assert "ValueError" in log_data["exception"]
        assert "bad yaml" in log_data["exception"]


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def test_get_logger_returns_structured_logger(self, json_logger):
        _, logger = json_logger
        assert isinstance(logger, StructuredLogger)

    def test_info_ctx(self, json_logger):
        stream, logger = json_logger

        logger.info_ctx("Activation recorded", version="0.2.0", install_status="upgraded")

        log_data = read_one(stream)
        assert log_data["message"] == "Activation recorded"
        assert log_data["context"] == {"version": "0.2.0", "install_status": "upgraded"}

    def test_record_points_at_caller(self, json_logger):
        stream, logger = json_logger

        logger.info_ctx("Where am I")

        assert read_one(stream)["function"] == "test_record_points_at_caller"

    def test_context_dict_and_kwargs(self, json_logger):
        stream, logger = json_logger

        logger.warning_ctx("Mixed", context={"a": 1}, b=2)

        log_data = read_one(stream)
        assert log_data["level"] == "WARNING"
        assert log_data["context"] == {"a": 1, "b": 2}

    def test_error_ctx_with_exception(self, json_logger):
        stream, logger = json_logger

        try:
            raise OSError("disk full")
        except OSError:
            logger.error_ctx("Save failed", path="meta.json", exc_info=True)

        log_data = read_one(stream)
        assert log_data["context"]["path"] == "meta.json"
        assert "disk full" in log_data["exception"]

    def test_disabled_level_is_skipped(self, json_logger):
        stream, logger = json_logger
        logger.setLevel(logging.INFO)

        logger.debug_ctx("Hidden", detail=1)

        assert stream.getvalue() == ""

    def test_no_context_key_without_context(self, json_logger):
        stream, logger = json_logger

        logger.info_ctx("Plain")

        assert "context" not in read_one(stream)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_json_logging(self, reset_logging):
        configure_logging(use_json=True, level=logging.DEBUG)

        assert is_json_logging()
        assert logging.root.level == logging.DEBUG
        assert len(logging.root.handlers) == 1
        assert isinstance(logging.root.handlers[0].formatter, JSONFormatter)

    def test_configure_standard_logging(self, reset_logging):
        configure_logging(use_json=False, level=logging.WARNING)

        assert not is_json_logging()
        assert logging.root.level == logging.WARNING
        assert not isinstance(logging.root.handlers[0].formatter, JSONFormatter)

    def test_configure_with_file(self, reset_logging, tmp_path):
        log_file = tmp_path / "lifecycle.log"

        configure_logging(use_json=True, log_file=log_file)
        assert len(logging.root.handlers) == 2

        get_logger(f"test.file.{uuid.uuid4().hex[:8]}").info_ctx("To file", key="value")
        for handler in logging.root.handlers:
            handler.flush()

        log_data = json.loads(log_file.read_text().strip())
        assert log_data["message"] == "To file"
        assert log_data["context"]["key"] == "value"

    def test_logger_class_changed(self, reset_logging):
        configure_logging(use_json=True)

        assert isinstance(logging.getLogger(f"test.class.{uuid.uuid4().hex[:8]}"), StructuredLogger)
