"""Object storage abstractions."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredObject:
    """Location of a stored image blob."""

    url: str
    handle: str


class ObjectStore(Protocol):
    """Interface for durable image blob storage."""

    async def store(self, image_bytes: bytes, namespace: str) -> StoredObject:
        """Store image bytes under a namespace and return its location."""

    async def delete(self, handle: str) -> None:
        """Delete a stored blob, raising StorageFailureError on failure."""


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type, "jpg")
