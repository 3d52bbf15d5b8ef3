"""Upload orchestration: store images, create records, queue extraction."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from event_gallery.domain.errors import (
    MissingPayloadError,
    NoImagesSucceededError,
    StorageFailureError,
)
from event_gallery.domain.photos import PhotoRecord
from event_gallery.services.events import EventService
from event_gallery.services.photos import PhotoRepository
from event_gallery.services.processing_queue import ExtractionTask, ProcessingQueue
from event_gallery.services.storage import ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePayload:
    """Raw image submitted by a client."""

    filename: str
    content: bytes


@dataclass(frozen=True)
class ImageFailure:
    """An image of a batch that could not be stored."""

    filename: str
    reason: str


@dataclass
class UploadResult:
    """Photos created by an upload, plus the images that failed."""

    photos: list[PhotoRecord] = field(default_factory=list)
    failures: list[ImageFailure] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


@dataclass
class IngestionService:
    """Orchestrates photo uploads for an event."""

    event_service: EventService
    photo_repository: PhotoRepository
    object_store: ObjectStore
    queue: ProcessingQueue
    storage_prefix: str = "starshot"

    async def upload(
        self, raw_event_id: object, images: list[ImagePayload]
    ) -> UploadResult:
        """Store each image and create its record; extraction runs later."""
        event = self.event_service.resolve_active_event(raw_event_id)
        if not images:
            raise MissingPayloadError("No photos received")

        namespace = f"{self.storage_prefix}/{event.id}"
        logger.info(
            "Upload started",
            extra={"event_id": str(event.id), "images": len(images)},
        )
        result = UploadResult()
        tasks: list[ExtractionTask] = []
        for image in images:
            if not image.content:
                result.failures.append(ImageFailure(image.filename, "Empty file"))
                continue
            photo = await self._ingest_one(event.id, namespace, image, result)
            if photo is None:
                continue
            result.photos.append(photo)
            tasks.append(ExtractionTask(photo_id=photo.id, image_bytes=image.content))

        if not result.photos:
            raise NoImagesSucceededError(result.failures)

        # No await between enqueueing and returning: extraction cannot begin
        # before the caller has its result.
        for task in tasks:
            self.queue.enqueue(task)
        logger.info(
            "Upload finished",
            extra={
                "event_id": str(event.id),
                "photos_created": len(result.photos),
                "failed": result.failed_count,
            },
        )
        return result

    async def _ingest_one(
        self,
        event_id: UUID,
        namespace: str,
        image: ImagePayload,
        result: UploadResult,
    ) -> PhotoRecord | None:
        try:
            stored = await self.object_store.store(image.content, namespace)
        except StorageFailureError as exc:
            logger.exception(
                "Image upload failed",
                extra={"event_id": str(event_id), "image_name": image.filename},
            )
            result.failures.append(ImageFailure(image.filename, str(exc)))
            return None
        try:
            return self.photo_repository.create_photo(
                event_id=event_id, url=stored.url, storage_handle=stored.handle
            )
        except Exception as exc:
            logger.exception(
                "Failed to create photo record",
                extra={"event_id": str(event_id), "image_name": image.filename},
            )
            result.failures.append(ImageFailure(image.filename, str(exc)))
        try:
            await self.object_store.delete(stored.handle)
        except StorageFailureError:
            logger.exception(
                "Failed to discard stored object", extra={"handle": stored.handle}
            )
        return None
