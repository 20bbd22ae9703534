"""
Logging configuration for host applications.

The library itself only creates module loggers; this sets a readable
default format when the host has not configured logging.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Apply a basic root configuration. No-op if handlers already exist."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
