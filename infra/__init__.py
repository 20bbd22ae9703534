"""
Infrastructure module exports.

Configuration and bootstrap for the API client.
"""

from .config import ClientConfig, StorageBackendType, get_config
from .bootstrap import ClientBootstrap, bootstrap_client
from .logging_setup import configure_logging

__all__ = [
    "ClientConfig",
    "StorageBackendType",
    "get_config",
    "ClientBootstrap",
    "bootstrap_client",
    "configure_logging",
]
