"""Structured logging for the flight telemetry logger.

Usage:
    from flightlog.logging import setup_logging, set_session_id

    setup_logging()
    set_session_id("5f0c...")
    logger = logging.getLogger(__name__)
    logger.info("Captured sample", extra={"buffer_size": 12})
"""

from flightlog.logging.config import LogFormat, LoggingConfig
from flightlog.logging.context import (
    clear_context,
    get_extra_context,
    get_session_id,
    session_id,
    set_extra_context,
    set_session_id,
)
from flightlog.logging.formatters import HumanFormatter, JSONFormatter
from flightlog.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LogFormat",
    "LoggingConfig",
    "clear_context",
    "get_extra_context",
    "get_logger",
    "get_session_id",
    "reset_logging",
    "session_id",
    "set_extra_context",
    "set_session_id",
    "setup_logging",
]
