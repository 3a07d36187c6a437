"""Image payload utilities.

Responsibilities:
    - Base64 encoding of uploaded images before submission
    - Validation and decoding of base64 images received by the API
"""

from tutor.parsing.image_encoder import ImageEncodingError, decode_image, encode_image

__all__ = ["ImageEncodingError", "decode_image", "encode_image"]
