"""Structured logging configuration for the repair job."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


_STANDARD_ATTRIBUTES = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
))


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
    ):
        super().__init__()
        self._include_timestamp = include_timestamp
        self._include_level = include_level
        self._include_logger = include_logger

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {}

        if self._include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        if self._include_level:
            log_data["level"] = record.levelname

        if self._include_logger:
            log_data["logger"] = record.name

        log_data["message"] = record.getMessage()

        # Job context fields
        if hasattr(record, "instance_suffix"):
            log_data["instance_suffix"] = record.instance_suffix
        if hasattr(record, "candidates"):
            log_data["candidates"] = record.candidates
        if hasattr(record, "deleted"):
            log_data["deleted"] = record.deleted
        if hasattr(record, "backfilled"):
            log_data["backfilled"] = record.backfilled

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Any other scalar extras
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _STANDARD_ATTRIBUTES or key in log_data:
                continue
            if isinstance(value, (str, int, float, bool, type(None))):
                log_data[key] = value

        return json.dumps(log_data)


class ContextLogger:
    """Logger with bound context fields."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger
        self._context: Dict[str, Any] = {}

    def with_context(self, **kwargs) -> "ContextLogger":
        """Create a new logger with additional context."""
        new_logger = ContextLogger(self._logger)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def _log(self, level: int, msg: str, **kwargs):
        extra = {**self._context, **kwargs}
        self._logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **kwargs):
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs):
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log(logging.WARNING, msg, **kwargs)

    def exception(self, msg: str, **kwargs):
        self._logger.exception(msg, extra={**self._context, **kwargs})


def configure_logging(
    log_format: str = "text",
    log_level: str = "INFO",
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the job.

    Args:
        log_format: "json" or "text"
        log_level: Logging level
        logger_name: Name for the logger (None for root)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level.upper()))

    logger.handlers.clear()

    # Progress output goes to stdout, so logs go to stderr
    handler = logging.StreamHandler(sys.stderr)

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))

    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger."""
    return ContextLogger(logging.getLogger(name))
