"""
Client configuration system.

Environment-based settings with sensible defaults, loaded from .env.
Defaults target the hosted backend, native image encoding and in-memory
token storage.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv

from wasteapi import (
    ANALYSIS_TIMEOUT_S,
    DEFAULT_BASE_URL,
    DEFAULT_COORDINATES,
    DEFAULT_TOKEN_KEY,
    CredentialHolder,
    ImageEncoder,
    InMemoryStorage,
    KeyValueStorage,
    SQLiteStorage,
    create_image_encoder,
)
from wasteapi.encoders import ImageEncoderType
from wasteapi.schemas import Coordinates

# Load environment variables from .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


StorageBackendType = Literal["memory", "sqlite"]


@dataclass
class ClientConfig:
    """Client configuration from environment."""

    # Backend
    base_url: str
    request_timeout_s: float
    analysis_timeout_s: float

    # Image encoding
    platform: ImageEncoderType

    # Fallback location used when a report carries no coordinates.
    # Stand-in for device geolocation.
    default_lat: float
    default_lng: float

    # Token storage
    storage_backend: StorageBackendType
    storage_path: Optional[str]
    token_key: str

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Backend: hosted API, 30s request timeout, 20s analysis timeout
        - Encoding: native (local image files)
        - Storage: in-memory (token does not survive restarts)
        """
        return cls(
            base_url=os.getenv("WASTE_API_BASE_URL", DEFAULT_BASE_URL),
            request_timeout_s=float(os.getenv("WASTE_API_REQUEST_TIMEOUT_S", "30")),
            analysis_timeout_s=float(
                os.getenv("WASTE_API_ANALYSIS_TIMEOUT_S", str(ANALYSIS_TIMEOUT_S))
            ),
            platform=os.getenv("WASTE_API_PLATFORM", "native"),  # type: ignore
            default_lat=float(os.getenv("WASTE_API_DEFAULT_LAT", str(DEFAULT_COORDINATES.lat))),
            default_lng=float(os.getenv("WASTE_API_DEFAULT_LNG", str(DEFAULT_COORDINATES.lng))),
            storage_backend=os.getenv("WASTE_API_STORAGE_BACKEND", "memory"),  # type: ignore
            storage_path=os.getenv("WASTE_API_STORAGE_PATH") or None,
            token_key=os.getenv("WASTE_API_TOKEN_KEY", DEFAULT_TOKEN_KEY),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def default_coordinates(self) -> Coordinates:
        return Coordinates(lat=self.default_lat, lng=self.default_lng)

    def create_storage(self) -> KeyValueStorage:
        """Create token storage based on configuration."""
        if self.storage_backend == "sqlite":
            return SQLiteStorage(self.storage_path)
        elif self.storage_backend == "memory":
            return InMemoryStorage()
        else:
            raise ValueError(f"Unknown storage backend: {self.storage_backend}")

    def create_credentials(self, storage: Optional[KeyValueStorage] = None) -> CredentialHolder:
        """Create the credential holder; reads the persisted token once."""
        return CredentialHolder(storage or self.create_storage(), key=self.token_key)

    def create_image_encoder(self) -> ImageEncoder:
        """Create image encoder for the configured platform."""
        if self.platform == "browser":
            return create_image_encoder("browser", timeout=self.request_timeout_s)
        return create_image_encoder(self.platform)


def get_config() -> ClientConfig:
    """Get client configuration from the current environment."""
    return ClientConfig.from_env()
