"""Selfie matching against an event's stored face descriptors."""

import logging
from dataclasses import dataclass

import numpy as np

from event_gallery.domain.errors import MissingPayloadError, NoFaceDetectedError
from event_gallery.domain.photos import (
    MATCH_THRESHOLD,
    FaceDescriptor,
    PhotoRecord,
    PhotoStatus,
)
from event_gallery.services.descriptors import DescriptorService
from event_gallery.services.events import EventService
from event_gallery.services.photos import PhotoRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Matching photos and how many event photos were not yet processed."""

    photos: list[PhotoRecord]
    processing_count: int


def euclidean_distance(first: FaceDescriptor, second: FaceDescriptor) -> float:
    """Return the L2 distance between two descriptors."""
    return float(
        np.linalg.norm(np.asarray(first.values) - np.asarray(second.values))
    )


def photo_matches(
    query: FaceDescriptor, photo: PhotoRecord, threshold: float = MATCH_THRESHOLD
) -> bool:
    """Return true when any face in the photo is within the threshold."""
    return any(
        euclidean_distance(query, descriptor) < threshold
        for descriptor in photo.descriptors
    )


@dataclass
class MatchService:
    """Finds the photos of an event in which a selfie's face appears."""

    event_service: EventService
    photo_repository: PhotoRepository
    descriptor_service: DescriptorService

    async def match(self, raw_event_id: object, selfie: bytes) -> MatchResult:
        """Return the event photos containing the face in the selfie."""
        event = self.event_service.resolve_active_event(raw_event_id)
        if not selfie:
            raise MissingPayloadError("No selfie received")

        descriptors = await self.descriptor_service.extract(selfie)
        if not descriptors:
            raise NoFaceDetectedError("No face detected in selfie")
        query = descriptors[0]

        photos = self.photo_repository.list_event_photos(event.id)
        matches = [photo for photo in photos if photo_matches(query, photo)]
        processing_count = sum(
            1 for photo in photos if photo.status is PhotoStatus.PROCESSING
        )
        logger.info(
            "Selfie matched",
            extra={
                "event_id": str(event.id),
                "scanned": len(photos),
                "matched": len(matches),
                "processing": processing_count,
            },
        )
        return MatchResult(photos=matches, processing_count=processing_count)
