"""
Key-value storage exports.

Persistence backends for the credential slot.
"""

from .base import KeyValueStorage
from .stub import InMemoryStorage
from .sqlite import SQLiteStorage

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "SQLiteStorage",
]
