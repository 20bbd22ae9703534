"""
Abstract key-value storage interface.

The platform slot where the bearer token survives restarts.
The client depends only on this interface, not on specific implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract persistence boundary.

    String keys, string values. A missing key reads as None.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the slot is empty."""
        raise NotImplementedError

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Empty the slot. Removing a missing key is a no-op."""
        raise NotImplementedError
