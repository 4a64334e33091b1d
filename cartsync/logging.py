"""
Centralized logging configuration for cartsync.

Usage:
    from cartsync.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart hydrated")
    logger.error("Failed to save cart", exc_info=True)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"


def _get_log_level() -> int:
    """Get log level from environment or default to INFO."""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure_root_logger() -> None:
    """Attach a stdout handler to the root logger unless the host already did."""
    root = logging.getLogger()

    if root.handlers:
        return

    root.setLevel(_get_log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_get_log_level())

    # LOG_FORMAT=simple drops timestamps (the host adds its own)
    simple = os.environ.get("LOG_FORMAT", "").lower() == "simple"
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if simple else LOG_FORMAT))

    root.addHandler(handler)

    # Every inventory round-trip would otherwise log a request line
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape control characters that could forge log entries (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: object) -> str:
    """
    Render an identifier for logging.

    Product ids come from the caller, so they are escaped and cut to
    16 characters before they reach a log line.

    Args:
        id_value: Identifier to render (can be None)

    Returns:
        Sanitized string or "N/A" if empty
    """
    if id_value is None or id_value == "":
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    return safe_value[:16]


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
]
