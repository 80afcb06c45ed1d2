"""Structured logging module."""

from kblifecycle.logging.structured_logger import (
    configure_logging,
    get_logger,
    is_json_logging,
    JSONFormatter,
    StructuredLogger,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "is_json_logging",
    "JSONFormatter",
    "StructuredLogger",
]
