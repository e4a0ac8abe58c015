"""Image upload workflow: validate, store in the bucket, build the public URL.

Deleting goes the other way and is best-effort: a stored object that cannot
be removed is logged and left behind so the metadata can still be deleted.
"""

import logging
import os
import uuid
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from dishka import Provider, Scope

from meme_service.clients import ObjectStorage
from meme_service.config import AwsConfig
from meme_service.errors import InvalidInputError
from meme_service.models.meme import MAX_KEYWORDS

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
MAX_IMAGE_SIZE = 10 * 1024 * 1024


@dataclass(frozen=True)
class UploadedImage:
    image_url: str
    keywords: list[str] = field(default_factory=list)


def parse_keywords(keywords_csv: str | None) -> list[str]:
    """Split a comma-separated keyword string, keeping the first 10 non-empty entries."""
    if not keywords_csv:
        return []

    keywords = [piece.strip() for piece in keywords_csv.split(",")]
    return [keyword for keyword in keywords if keyword][:MAX_KEYWORDS]


def generate_storage_key(original_name: str | None) -> str:
    _, extension = os.path.splitext(original_name or "")
    return f"{uuid.uuid4()}{extension}"


def key_from_url(image_url: str) -> str | None:
    """Last path segment of a ``{service}/{bucket}/{key}`` URL, if there is one."""
    try:
        path = urlsplit(image_url).path
    except ValueError:
        return None

    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        return None
    return segments[-1]


def validate_image(data: bytes | None, content_type: str | None) -> tuple[bytes, str]:
    """Return the image bytes and content type once they pass every check."""
    if not data:
        raise InvalidInputError("Image file is required")

    if content_type is None or content_type.lower() not in ALLOWED_CONTENT_TYPES:
        raise InvalidInputError("Only JPEG, PNG, GIF, and WebP images are allowed")

    if len(data) > MAX_IMAGE_SIZE:
        raise InvalidInputError("Image size cannot exceed 10MB")

    return data, content_type


class ImageUploadService:
    def __init__(self, storage: ObjectStorage, config: AwsConfig) -> None:
        self._storage = storage
        self._bucket = config.bucket_name
        self._service_url = config.service_url.rstrip("/")

    def public_url(self, key: str) -> str:
        return f"{self._service_url}/{self._bucket}/{key}"

    async def upload(
        self,
        data: bytes | None,
        content_type: str | None,
        original_name: str | None,
        keywords_csv: str | None = "",
    ) -> UploadedImage:
        data, content_type = validate_image(data, content_type)

        key = generate_storage_key(original_name)
        await self._storage.put(key, data, content_type, public=True)

        logger.info("Image stored", extra={"key": key, "size": len(data)})

        return UploadedImage(
            image_url=self.public_url(key),
            keywords=parse_keywords(keywords_csv),
        )

    async def delete(self, image_url: str) -> bool:
        """Remove the object behind ``image_url``; never raises."""
        key = key_from_url(image_url)
        if not key:
            logger.warning(
                "Skipping image cleanup, no storage key in URL",
                extra={"image_url": image_url},
            )
            return False

        try:
            await self._storage.delete(key)
        except Exception:
            logger.warning(
                "Failed to delete image from storage",
                extra={"key": key},
                exc_info=True,
            )
            return False

        logger.info("Image deleted", extra={"key": key})
        return True


upload_service_provider = Provider(scope=Scope.APP)
upload_service_provider.provide(ImageUploadService)
