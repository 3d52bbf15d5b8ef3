"""Face descriptor extraction service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from event_gallery.domain.errors import ExtractionFailureError, GalleryError
from event_gallery.domain.photos import FaceDescriptor

logger = logging.getLogger(__name__)


class DescriptorExtractor(Protocol):
    """Interface for face detection backends."""

    async def extract(self, image_bytes: bytes) -> list[list[float]]:
        """Return one raw feature vector per detected face."""

    async def wait_idle(self) -> None:
        """Return once no extraction started earlier is still running."""


@dataclass
class DescriptorService:
    """Service that runs an extractor and validates its output."""

    extractor: DescriptorExtractor

    async def extract(self, image_bytes: bytes) -> tuple[FaceDescriptor, ...]:
        """Extract typed descriptors, rejecting malformed vectors."""
        try:
            raw = await self.extractor.extract(image_bytes)
        except GalleryError:
            raise
        except Exception as exc:
            raise ExtractionFailureError(f"Face extraction failed: {exc}") from exc
        if not isinstance(raw, list):
            raise ExtractionFailureError(
                f"Extractor returned {type(raw).__name__}, expected a list"
            )
        descriptors = tuple(FaceDescriptor.from_values(vector) for vector in raw)
        logger.debug("Extracted descriptors", extra={"faces": len(descriptors)})
        return descriptors

    async def wait_idle(self) -> None:
        await self.extractor.wait_idle()
