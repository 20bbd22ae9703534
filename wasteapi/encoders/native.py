"""
Native image encoder.

Builds a file descriptor {uri, mime type, filename} from the image URI and
reads the local file into the multipart part.
"""

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from ..errors import RequestValidationError
from ..schemas import ImageFile, ImagePart
from .base import DEFAULT_IMAGE_FILENAME, DEFAULT_IMAGE_MIME, IMAGE_FIELD_NAME, ImageEncoder

logger = logging.getLogger(__name__)


IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}


def infer_image_mime(filename: str) -> str:
    """MIME type from the file extension; image/jpeg when unrecognized."""
    suffix = Path(filename).suffix.lower()
    return IMAGE_MIME_TYPES.get(suffix, DEFAULT_IMAGE_MIME)


def uri_to_path(uri: str) -> Path:
    """Local filesystem path for a plain path or file:// URI."""
    if uri.startswith("file://"):
        return Path(unquote(urlparse(uri).path))
    return Path(uri)


def describe_image(uri: str) -> ImageFile:
    """Build the native file descriptor for ``uri``."""
    segment = uri.rstrip("/").rsplit("/", 1)[-1]
    # Drop any query string or fragment from the last segment
    filename = segment.split("?", 1)[0].split("#", 1)[0] or DEFAULT_IMAGE_FILENAME
    return ImageFile(uri=uri, mime_type=infer_image_mime(filename), filename=filename)


class NativeImageEncoder(ImageEncoder):
    """Encoder for images that live on the device filesystem."""

    async def encode(self, image_uri: str) -> ImagePart:
        descriptor = describe_image(image_uri)
        path = uri_to_path(descriptor.uri)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            logger.error(
                f"Cannot read image file {path}: {e}",
                extra={"image_uri": image_uri},
            )
            raise RequestValidationError("image", f"Cannot read image file: {path}") from e

        logger.debug(
            f"Encoded native image {descriptor.filename} ({descriptor.mime_type}, {len(content)} bytes)"
        )
        return ImagePart(
            field_name=IMAGE_FIELD_NAME,
            filename=descriptor.filename,
            content=content,
            mime_type=descriptor.mime_type,
        )
