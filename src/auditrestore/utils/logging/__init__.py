"""
Logging setup for audit-restore

Usage:
    from auditrestore.utils.logging import setup_logging, ContextLogger

    setup_logging(level="INFO", log_file="/var/log/audit-restore/restore.log")

    log = ContextLogger(__name__, host="db1", table="audit_log")
    log.info("Restoring subset", subset="2024-01")
"""

from .config import configure_from_env, setup_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
