"""
Image encoder exports.

Clean interface for the client to import encoding components.
"""

from .base import (
    DEFAULT_IMAGE_FILENAME,
    DEFAULT_IMAGE_MIME,
    IMAGE_FIELD_NAME,
    ImageEncoder,
    ImageEncoderType,
)
from .browser import BrowserImageEncoder
from .native import NativeImageEncoder, describe_image, infer_image_mime


def create_image_encoder(platform: ImageEncoderType = "native", **kwargs) -> ImageEncoder:
    """Pick the encoder for a platform target."""
    if platform == "browser":
        return BrowserImageEncoder(**kwargs)
    if platform == "native":
        return NativeImageEncoder()
    raise ValueError(f"Unknown image encoder platform: {platform}")


__all__ = [
    "DEFAULT_IMAGE_FILENAME",
    "DEFAULT_IMAGE_MIME",
    "IMAGE_FIELD_NAME",
    "ImageEncoder",
    "ImageEncoderType",
    "BrowserImageEncoder",
    "NativeImageEncoder",
    "create_image_encoder",
    "describe_image",
    "infer_image_mime",
]
