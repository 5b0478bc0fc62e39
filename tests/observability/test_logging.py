"""Tests for structured logging."""

import json
import logging
import sys

from calendar_repair.observability.logging import (
    JSONFormatter,
    ContextLogger,
    configure_logging,
    get_logger,
)


def _record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_basic_message(self):
        """Formats basic log message as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["message"] == "Test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert "timestamp" in data

    def test_format_with_job_fields(self):
        """Includes job context fields in JSON output."""
        record = _record(instance_suffix="foo.bar", candidates=24, deleted=15, backfilled=0)

        data = json.loads(JSONFormatter().format(record))

        assert data["instance_suffix"] == "foo.bar"
        assert data["candidates"] == 24
        assert data["deleted"] == 15
        assert data["backfilled"] == 0

    def test_format_skips_non_scalar_extras(self):
        """Extras that are not JSON scalars are dropped."""
        data = json.loads(JSONFormatter().format(_record(batch_ids=[1, 2], batch=3)))

        assert "batch_ids" not in data
        assert data["batch"] == 3

    def test_format_without_timestamp(self):
        """Can exclude timestamp."""
        data = json.loads(JSONFormatter(include_timestamp=False).format(_record()))

        assert "timestamp" not in data

    def test_format_exception(self):
        """Exception text is included."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in data["exception"]


class TestContextLogger:
    """Tests for ContextLogger."""

    def test_with_context(self):
        """Can add context to logger."""
        logger = ContextLogger(logging.getLogger("test_context"))

        ctx_logger = logger.with_context(instance_suffix="foo.bar")

        assert ctx_logger is not logger
        assert ctx_logger._context == {"instance_suffix": "foo.bar"}
        assert logger._context == {}

    def test_context_chaining(self):
        """Can chain context additions."""
        logger = ContextLogger(logging.getLogger("test_chain"))

        ctx = logger.with_context(instance_suffix="a").with_context(candidates=3)

        assert ctx._context == {"instance_suffix": "a", "candidates": 3}

    def test_context_reaches_records(self, caplog):
        """Bound context and per-call fields end up on the record."""
        logger = get_logger("test_records").with_context(instance_suffix="a")

        with caplog.at_level(logging.INFO, logger="test_records"):
            logger.info("hello", deleted=2)

        record = caplog.records[-1]
        assert record.instance_suffix == "a"
        assert record.deleted == 2


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure_json_format(self):
        """Configures JSON format."""
        logger = configure_logging(
            log_format="json",
            log_level="INFO",
            logger_name="test_json",
        )

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_configure_text_format(self):
        """Configures text format."""
        logger = configure_logging(
            log_format="text",
            log_level="DEBUG",
            logger_name="test_text",
        )

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reconfigure_replaces_handlers(self):
        """Configuring twice does not stack handlers."""
        configure_logging(logger_name="test_twice")
        logger = configure_logging(logger_name="test_twice")

        assert len(logger.handlers) == 1


class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_context_logger(self):
        """Returns ContextLogger instance."""
        assert isinstance(get_logger("test"), ContextLogger)
