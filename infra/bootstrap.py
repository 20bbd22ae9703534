"""
Client initialization and bootstrap.

Singleton pattern for building the configured RemoteServiceClient.
"""

from typing import Optional

from wasteapi import CredentialHolder, RemoteServiceClient

from .config import ClientConfig, get_config
from .logging_setup import configure_logging


class ClientBootstrap:
    """
    Bootstrap the API client from configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["ClientBootstrap"] = None

    def __init__(self, config: Optional[ClientConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        configure_logging(self.config.log_level)
        self.credentials = self.config.create_credentials()
        self.client = RemoteServiceClient(
            base_url=self.config.base_url,
            credentials=self.credentials,
            image_encoder=self.config.create_image_encoder(),
            request_timeout=self.config.request_timeout_s,
            analysis_timeout=self.config.analysis_timeout_s,
            default_coordinates=self.config.default_coordinates,
        )

    @classmethod
    def get_instance(cls, config: Optional[ClientConfig] = None) -> "ClientBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton ClientBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """
        Reset singleton (for testing).

        The dropped client is not closed; use shutdown() to release it.
        """
        cls._instance = None

    @classmethod
    async def shutdown(cls):
        """Close the singleton client and its transports, then reset."""
        instance = cls._instance
        cls._instance = None
        if instance is not None:
            await instance.client.aclose()

    def get_client(self) -> RemoteServiceClient:
        return self.client

    def get_credentials(self) -> CredentialHolder:
        return self.credentials

    def __repr__(self) -> str:
        return (
            f"ClientBootstrap(base_url={self.config.base_url}, "
            f"platform={self.config.platform}, "
            f"storage={self.config.storage_backend})"
        )


def bootstrap_client(config: Optional[ClientConfig] = None) -> RemoteServiceClient:
    """
    Build (or reuse) the process-wide API client.

    Args:
        config: Optional custom configuration

    Returns:
        Configured RemoteServiceClient
    """
    return ClientBootstrap.get_instance(config).get_client()
