"""
Bearer token holder.

State machine:
    NoToken --(loaded from storage at construction)--> Token
    NoToken --(set after login/signup)--------------> Token
    Token   --(clear on logout)---------------------> NoToken

No expiry tracking and no refresh: the server rejects stale tokens.
Each request reads the token once, so a change is visible to later
requests only, never to ones already in flight.
"""

import logging
from typing import Optional

from .storage import InMemoryStorage, KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_KEY = "authToken"


def mask_token(token: Optional[str]) -> str:
    """Loggable form of a token: short prefix only."""
    if not token:
        return "<none>"
    return f"{token[:8]}..."


class CredentialHolder:
    """
    Holds at most one bearer token and mirrors it to storage.

    Usage:
        holder = CredentialHolder(SQLiteStorage("client.db"))
        client = RemoteServiceClient(credentials=holder)
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = DEFAULT_TOKEN_KEY,
    ):
        self.storage = storage or InMemoryStorage()
        self.key = key
        # The persisted slot is read exactly once
        self._token: Optional[str] = self.storage.get_item(key) or None
        if self._token:
            logger.info(f"Auth token loaded from storage: {mask_token(self._token)}")

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        """Overwrite the held token and persist it."""
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token
        self.storage.set_item(self.key, token)
        logger.info(f"Auth token set: {mask_token(token)}")

    def clear(self) -> None:
        """Drop the held token and empty the persisted slot."""
        self._token = None
        self.storage.remove_item(self.key)
        logger.info("Auth token cleared")

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def authorization_header(self) -> dict:
        """Header mapping for the current token; empty when none is held."""
        token = self._token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
