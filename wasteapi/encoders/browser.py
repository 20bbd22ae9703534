"""
Browser image encoder.

Dereferences the image URI with an HTTP fetch and attaches the bytes as a
blob under the fixed filename.
"""

import logging
from typing import Optional

import httpx

from ..errors import ApiError, NetworkError
from ..schemas import ImagePart
from .base import DEFAULT_IMAGE_FILENAME, DEFAULT_IMAGE_MIME, IMAGE_FIELD_NAME, ImageEncoder

logger = logging.getLogger(__name__)


class BrowserImageEncoder(ImageEncoder):
    """
    Encoder for images addressed by URL.

    Uses its own httpx client unless one is injected; an injected client is
    never closed by the encoder.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def encode(self, image_uri: str) -> ImagePart:
        try:
            response = await self._client.get(image_uri)
        except httpx.TransportError as e:
            logger.error(f"Image fetch failed for {image_uri}: {e}", exc_info=True)
            raise NetworkError(f"Image fetch failed: {e}") from e

        if not response.is_success:
            raise ApiError(
                response.status_code,
                f"Image fetch failed: HTTP Error: {response.status_code}",
            )

        content_type = response.headers.get("content-type", "")
        mime_type = content_type.split(";", 1)[0].strip() or DEFAULT_IMAGE_MIME

        return ImagePart(
            field_name=IMAGE_FIELD_NAME,
            filename=DEFAULT_IMAGE_FILENAME,
            content=response.content,
            mime_type=mime_type,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
