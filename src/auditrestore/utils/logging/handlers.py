"""
Logging wrappers carrying restore context.

Provides ContextLogger, which stamps the target host, table and subset
onto every record so the JSON and console formatters can render them.
"""

import logging
from typing import Any


class ContextLogger:
    """
    Logger wrapper that attaches fixed restore context to every message

    Usage:
        log = ContextLogger(__name__, host="db1", table="audit_log")
        log.info("Restoring subset", subset="2024-01")
        # Record carries host, table and subset
    """

    def __init__(self, name: str, **context):
        """
        Initialize context logger

        Args:
            name: Logger name
            **context: Key-value pairs included in every record
        """
        self.logger = logging.getLogger(name)
        self.context = context

    def _log(self, level: int, msg: str, *args, exc_info=None, **kwargs) -> None:
        """
        Log with the bound context merged into `extra`

        Args:
            level: Log level
            msg: Log message
            *args: Message format args
            exc_info: Exception info
            **kwargs: Per-call context, overriding bound keys
        """
        self.logger.log(level, msg, *args, exc_info=exc_info, extra={**self.context, **kwargs})

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message with context"""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        """Log info message with context"""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        """Log warning message with context"""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        """Log error message with context"""
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def bind(self, **context) -> "ContextLogger":
        """
        Derive a logger with additional context

        Args:
            **context: Extra key-value pairs, e.g. the subset being restored

        Returns:
            New ContextLogger; this logger's context is left unchanged
        """
        return ContextLogger(self.logger.name, **{**self.context, **context})

    def get_context(self) -> dict[str, Any]:
        """
        Get current context

        Returns:
            Copy of the bound key-value pairs
        """
        return self.context.copy()
