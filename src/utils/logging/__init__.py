"""
Structured logging for the reconciliation tool

Usage:
    from utils.logging import setup_logging, get_logger

    setup_logging(level="INFO", log_file="logs/reconcile.log")
    logger = get_logger(__name__)
    logger.info("Date check complete", extra={"check": "date", "rows": 42})
"""

from .config import configure_from_env, get_logger, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
