"""Photo record persistence and deletion cascades."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from event_gallery.domain.errors import StorageFailureError
from event_gallery.domain.photos import FaceDescriptor, PhotoRecord, PhotoStatus
from event_gallery.services.storage import ObjectStore

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo records."""

    def create_photo(self, event_id: UUID, url: str, storage_handle: str) -> PhotoRecord:
        """Create a photo in PROCESSING with no descriptors and return it."""

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_event_photos(self, event_id: UUID) -> list[PhotoRecord]:
        """Return all photos of an event, newest first."""

    def complete_processing(
        self,
        photo_id: UUID,
        status: PhotoStatus,
        descriptors: tuple[FaceDescriptor, ...],
    ) -> bool:
        """Write the terminal status once; return false if already terminal or gone."""

    def list_processing_photos(self, created_before: datetime) -> list[PhotoRecord]:
        """Return photos still PROCESSING that were created before a timestamp."""

    def delete_photo(self, photo_id: UUID) -> bool:
        """Delete a photo record; return false when it did not exist."""

    def delete_photos(self, photo_ids: list[UUID]) -> int:
        """Delete the given photo records and return how many were removed."""


@dataclass
class CascadeReport:
    """Outcome of removing photos from both the record and object stores."""

    photos_removed: int = 0
    storage_failures: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.storage_failures)


@dataclass
class PhotoService:
    """Service for photo queries and deletion."""

    repository: PhotoRepository
    object_store: ObjectStore

    def list_event_photos(self, event_id: UUID) -> list[PhotoRecord]:
        """Return an event's photos, newest first."""
        return self.repository.list_event_photos(event_id)

    async def delete_photo(self, photo_id: UUID) -> CascadeReport | None:
        """Delete one photo and its stored object; None when the photo is missing."""
        photo = self.repository.get_photo(photo_id)
        if photo is None:
            return None
        report = CascadeReport()
        await self._release_object(photo, report)
        if self.repository.delete_photo(photo_id):
            report.photos_removed = 1
        return report

    async def purge_event_photos(self, event_id: UUID) -> CascadeReport:
        """Delete every photo of an event, releasing stored objects best-effort."""
        report = CascadeReport()
        photos = self.repository.list_event_photos(event_id)
        for photo in photos:
            await self._release_object(photo, report)
        # Only the listed rows: a photo created meanwhile keeps its record until
        # its object has been released too.
        report.photos_removed = self.repository.delete_photos(
            [photo.id for photo in photos]
        )
        logger.info(
            "Purged event photos",
            extra={
                "event_id": str(event_id),
                "photos_removed": report.photos_removed,
                "storage_failures": len(report.storage_failures),
            },
        )
        return report

    async def _release_object(self, photo: PhotoRecord, report: CascadeReport) -> None:
        try:
            await self.object_store.delete(photo.storage_handle)
        except StorageFailureError:
            logger.exception(
                "Failed to delete stored object",
                extra={"photo_id": str(photo.id), "handle": photo.storage_handle},
            )
            report.storage_failures.append(photo.storage_handle)
