"""
Apocapalette Structured Logging
Loguru sink setup shared by the API process and the token core.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from apocapalette.config import config


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


class StructuredLogger:
    """Structured logger for the token core service."""

    def __init__(self, level: Optional[str] = None, serialize: Optional[bool] = None):
        """
        Replace loguru's default handler with one stdout sink.

        Args:
            level: Minimum level; defaults to config.LOG_LEVEL
            serialize: Emit JSON lines; defaults to config.LOG_JSON
        """
        self.level = (level or config.LOG_LEVEL).upper()
        self.serialize = config.LOG_JSON if serialize is None else serialize

        logger.remove()
        logger.add(sys.stdout, format=LOG_FORMAT, level=self.level, serialize=self.serialize)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        target = logger.bind(**extra) if extra else logger
        target.info(message)

    def request(self, request_id: str, endpoint: str):
        """Logger bound to one request's id and endpoint."""
        return logger.bind(request_id=request_id, endpoint=endpoint)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
