"""Observability module for the repair job."""

from calendar_repair.observability.logging import (
    JSONFormatter,
    ContextLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "JSONFormatter",
    "ContextLogger",
    "configure_logging",
    "get_logger",
]
