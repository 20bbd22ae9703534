"""
Image encoder abstract interface.

Role: image URI -> multipart file part.

Rules:
- One implementation per platform target, chosen at client construction
- Always labels the part with the fixed field name "image"
- Never substitutes a placeholder when the image cannot be obtained
"""

from abc import ABC, abstractmethod
from typing import Literal

from ..schemas import ImagePart


ImageEncoderType = Literal["native", "browser"]

IMAGE_FIELD_NAME = "image"
DEFAULT_IMAGE_FILENAME = "waste-image.jpg"
DEFAULT_IMAGE_MIME = "image/jpeg"


class ImageEncoder(ABC):
    """
    Abstract image encoding boundary.
    Client code must depend ONLY on this interface.
    """

    @abstractmethod
    async def encode(self, image_uri: str) -> ImagePart:
        """
        Turn an image URI into a multipart file part.

        Args:
            image_uri: Location of the image (URL, local path, or file:// URI)

        Returns:
            ImagePart ready to attach to a MultipartForm
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any resources held by the encoder."""
        return None
