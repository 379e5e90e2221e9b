"""
Structured logging configuration for tablesync

Provides JSON-formatted logging with contextual information for
reconciliation and rendering runs.

Usage:
    import logging

    from tablesync.utils.logging import setup_logging

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", log_file="/var/log/tablesync/sync.log")

    # Get logger for your module
    logger = logging.getLogger(__name__)

    # Log with context
    logger.info("Reconciled table", extra={
        "table_name": "customers",
        "added": 3,
        "change_type": "added",
    })
"""

from .config import configure_from_env, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "configure_from_env",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
