"""Image references: display URLs, upload ids and keys, and pre-flight file validation."""
import random
import string
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from utils.config import PHOTOS_BASE_URL

PHOTO_FOLDER = "WebSitePhotos"
SOURCE_SUFFIX = "___Source.jpg"

MAX_IMAGE_BYTES = 10 * 1024 * 1024
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

INVALID_TYPE_MESSAGE = "Please select a valid image file (JPEG, PNG, or WebP)"
TOO_LARGE_MESSAGE = "Image file size must be less than 10MB"

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class ImageRef:
    id: str
    src: str


def image_display_url(image_id: str, prefix: str = PHOTOS_BASE_URL) -> str:
    return prefix + image_id + SOURCE_SUFFIX


def resolve_images(image_ids: Optional[Iterable[str]], prefix: str = PHOTOS_BASE_URL) -> list[ImageRef]:
    """Map stored image ids to fetchable URLs. None or empty gives []."""
    if not image_ids:
        return []
    return [ImageRef(id=i, src=image_display_url(i, prefix)) for i in image_ids]


def generate_image_id(entity_id: str, now_ms: Optional[int] = None) -> str:
    """slipway_<entityId>_<epoch ms>_<6 random chars>, unique without a server round trip."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choices(_RANDOM_ALPHABET, k=6))
    return f"slipway_{entity_id}_{timestamp}_{suffix}"


def object_key(image_id: str) -> str:
    return f"{PHOTO_FOLDER}/{image_id}{SOURCE_SUFFIX}"


def validate_image_file(content_type: Optional[str], size: int) -> tuple[bool, str]:
    """Returns (ok, error_message). Type is checked before size."""
    if (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        return False, INVALID_TYPE_MESSAGE
    if size > MAX_IMAGE_BYTES:
        return False, TOO_LARGE_MESSAGE
    return True, ""
