"""Structured logging with optional JSON output."""

import json
import logging
import sys
from datetime import datetime, UTC
from typing import Any, Dict, Optional
from pathlib import Path


class JSONFormatter(logging.Formatter):
    """
    Format log records as one JSON object per line.

    Context passed through ``extra={"context": {...}}`` (or the ``*_ctx``
    methods of StructuredLogger) is emitted under the ``context`` key.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if getattr(record, "context", None):
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_trace"] = record.stack_info

        return json.dumps(log_data, default=str)


class StructuredLogger(logging.Logger):
    """
    Logger with context-aware convenience methods.

    Example:
        logger.info_ctx("Backfilled config", ws_root="/notes", added=3)
    """

    def _log_with_context(
        self,
        level: int,
        msg: str,
        context: Optional[Dict[str, Any]] = None,
        exc_info: Any = None,
        **kwargs
    ) -> None:
        if not self.isEnabledFor(level):
            return

        final_context = {}
        if context:
            final_context.update(context)
        if kwargs:
            final_context.update(kwargs)

        extra = {"context": final_context} if final_context else {}
        # stacklevel=3 attributes the record to the caller of the *_ctx method
        self.log(level, msg, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug_ctx(self, msg: str, context: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, msg, context, **kwargs)

    def info_ctx(self, msg: str, context: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        self._log_with_context(logging.INFO, msg, context, **kwargs)

    def warning_ctx(self, msg: str, context: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        self._log_with_context(logging.WARNING, msg, context, **kwargs)

    def error_ctx(
        self,
        msg: str,
        context: Optional[Dict[str, Any]] = None,
        exc_info: Any = None,
        **kwargs
    ) -> None:
        """
        Log error message with context.

        Args:
            msg: Log message
            context: Dictionary of context fields
            exc_info: Exception info (True, exception instance, or exc_info tuple)
            **kwargs: Additional context fields as keyword arguments
        """
        self._log_with_context(logging.ERROR, msg, context, exc_info=exc_info, **kwargs)


_use_json_format = False


def configure_logging(
    use_json: bool = False,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure logging globally.

    Args:
        use_json: Emit JSON lines instead of plain text
        level: Root log level
        log_file: Optional file to write logs to, in addition to stderr
    """
    global _use_json_format

    logging.setLoggerClass(StructuredLogger)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if use_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    _use_json_format = use_json

    # stderr keeps stdout free for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Backward compatible with logging.getLogger() but returns a
    StructuredLogger with the ``*_ctx`` methods.
    """
    if not issubclass(logging.getLoggerClass(), StructuredLogger):
        logging.setLoggerClass(StructuredLogger)
    return logging.getLogger(name)


def is_json_logging() -> bool:
    """True if JSON logging is configured."""
    return _use_json_format
