"""
Avatar service for embedded (data URL) avatar images.

Player forms send avatars either as a plain URL or as a base64 data URL.
Embedded images are decoded, validated (size, type, real image), uploaded
to the object store under avatars/, and replaced by their /assets/ path.
"""

import base64
import binascii
import logging
import re
import uuid
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image

from courtboard.services import s3_service
from courtboard.utils.constants import AVATAR_KEY_PREFIX

logger = logging.getLogger(__name__)

# Validation constants
MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024  # 5MB
MAX_IMAGE_PIXELS = 25_000_000  # 25MP (~5000x5000), decompression bomb limit
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

_DATA_URL_RE = re.compile(r"^data:(?P<content_type>image/[\w.+-]+);base64,(?P<payload>.+)$", re.DOTALL)

# Set Pillow's built-in decompression bomb guard as well
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS


class InvalidAvatarError(ValueError):
    """Raised when an embedded avatar cannot be decoded or is not an acceptable image."""


def is_embedded_image(value: Optional[str]) -> bool:
    """True if the value is a base64 image data URL rather than a plain URL."""
    return bool(value) and value.startswith("data:image/")


def decode_data_url(value: str) -> Tuple[bytes, str]:
    """
    Decode a base64 image data URL.

    Returns:
        Tuple of (image bytes, content type)

    Raises:
        InvalidAvatarError: if the value is not a well-formed base64 image data URL
    """
    match = _DATA_URL_RE.match(value.strip())
    if not match:
        raise InvalidAvatarError("Avatar must be a base64 encoded image data URL")

    content_type = match.group("content_type").lower()
    if content_type == "image/jpg":
        content_type = "image/jpeg"
    try:
        image_bytes = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidAvatarError("Avatar payload is not valid base64")
    return image_bytes, content_type


def validate_avatar(file_bytes: bytes, content_type: str) -> Tuple[bool, str]:
    """
    Validate decoded avatar bytes.

    Checks file size and content type. Attempts to open with Pillow to verify
    the bytes are a real, non-corrupted image.

    Args:
        file_bytes: Decoded image bytes
        content_type: MIME type declared by the data URL

    Returns:
        Tuple of (is_valid, error_message). error_message is empty string if valid.
    """
    if not file_bytes:
        return False, "Image is empty"

    if len(file_bytes) > MAX_FILE_SIZE_BYTES:
        return False, f"File size exceeds maximum of {MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB"

    if not content_type or content_type not in ALLOWED_CONTENT_TYPES:
        return False, f"Invalid file type '{content_type}'. Allowed: JPEG, PNG, WebP, GIF"

    try:
        img = Image.open(BytesIO(file_bytes))
        width, height = img.size
        pixel_count = width * height
        if pixel_count > MAX_IMAGE_PIXELS:
            return False, (
                f"Image dimensions too large ({width}x{height} = {pixel_count:,} pixels). "
                f"Maximum is {MAX_IMAGE_PIXELS:,} pixels."
            )
        img.verify()
    except Image.DecompressionBombError:
        return False, "Image dimensions too large (possible decompression bomb)"
    except Exception as e:
        return False, f"Invalid or corrupted image file: {str(e)}"

    return True, ""


def generate_avatar_key(content_type: str) -> str:
    """Unique object key under the avatars/ prefix, e.g. avatars/9c1e....png"""
    extension = EXTENSIONS.get(content_type, "img")
    return f"{AVATAR_KEY_PREFIX}/{uuid.uuid4().hex}.{extension}"


async def store_embedded_avatar(value: str) -> str:
    """
    Decode, validate and upload an embedded avatar.

    Returns:
        The /assets/ reference path to persist in place of the data URL

    Raises:
        InvalidAvatarError: if the payload is not an acceptable image
    """
    image_bytes, content_type = decode_data_url(value)
    is_valid, error = validate_avatar(image_bytes, content_type)
    if not is_valid:
        raise InvalidAvatarError(error)

    key = generate_avatar_key(content_type)
    await s3_service.upload_file(image_bytes, key, content_type=content_type)
    logger.info("Stored embedded avatar at %s", key)
    return s3_service.asset_path_for_key(key)


async def resolve_avatar_input(value: Optional[str]) -> Optional[str]:
    """
    Normalize an avatarUrl coming from a request.

    Empty values clear the avatar (None), embedded images are uploaded and
    replaced by their asset path, anything else is stored as given.
    """
    if not value or not value.strip():
        return None
    if is_embedded_image(value):
        return await store_embedded_avatar(value)
    return value.strip()
