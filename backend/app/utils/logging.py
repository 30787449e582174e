"""
Palette Service Structured Logging
Request-scoped log records on top of loguru.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from app.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class StructuredLogger:
    """Loguru wrapper that attaches request fields (id, mode, strategy, timings) to each record."""

    def __init__(self, level: Optional[str] = None, serialize: Optional[bool] = None):
        logger.remove()
        logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=level or config.LOG_LEVEL,
            serialize=config.LOG_JSON if serialize is None else serialize
        )

    @staticmethod
    def _emit(level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = logger.bind(**extra) if extra else logger
        # Report the caller's location rather than this wrapper
        target.opt(depth=2).log(level, message)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("DEBUG", message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("ERROR", message, extra)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the process-wide logger."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
