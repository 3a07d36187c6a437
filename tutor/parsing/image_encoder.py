"""Image encoding for multimodal chat requests.

Converts uploaded image bytes to base64 text for transport and back.
"""

import base64
import binascii
import logging

logger = logging.getLogger(__name__)


class ImageEncodingError(Exception):
    """Raised when an image cannot be encoded or decoded."""

    pass


def encode_image(image_bytes: bytes) -> str:
    """Encode raw image bytes as base64 text.

    Args:
        image_bytes: Raw bytes of the selected file.

    Returns:
        ASCII base64 string without a data URL prefix.

    Raises:
        ImageEncodingError: If the payload is empty or not bytes.
    """
    if not isinstance(image_bytes, (bytes, bytearray, memoryview)):
        raise ImageEncodingError(f"Expected bytes, got {type(image_bytes).__name__}")

    if not image_bytes:
        raise ImageEncodingError("Empty image provided")

    return base64.b64encode(image_bytes).decode("ascii")


def decode_image(encoded: str) -> bytes:
    """Decode base64 image text back to raw bytes.

    Accepts an optional ``data:<mime>;base64,`` prefix.

    Raises:
        ImageEncodingError: If the text is empty or not valid base64.
    """
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]

    if not encoded.strip():
        raise ImageEncodingError("Empty image provided")

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageEncodingError(f"Invalid base64 image: {e}") from e
