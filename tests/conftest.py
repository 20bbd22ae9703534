"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.helpers import BASE_URL, RecordingHandler  # noqa: E402
from wasteapi import CredentialHolder, InMemoryStorage, NativeImageEncoder, RemoteServiceClient  # noqa: E402


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def credentials():
    return CredentialHolder(InMemoryStorage())


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "waste.png"
    path.write_bytes(b"\x89PNG fake image bytes")
    return path


@pytest.fixture
def make_client(credentials):
    """Factory building a client wired to a RecordingHandler."""

    def _make(handler: RecordingHandler, **kwargs) -> RemoteServiceClient:
        kwargs.setdefault("credentials", credentials)
        kwargs.setdefault("image_encoder", NativeImageEncoder())
        return RemoteServiceClient(
            base_url=BASE_URL,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            **kwargs,
        )

    return _make
