"""Pydantic response models for the gallery API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from event_gallery.domain.photos import PhotoRecord, PhotoStatus
from event_gallery.services.photos import CascadeReport


class PhotoResponse(BaseModel):
    """Photo as exposed to clients; descriptors stay server-side."""

    id: UUID
    event_id: UUID
    url: str
    status: PhotoStatus
    face_count: int
    created_at: datetime

    @classmethod
    def from_record(cls, photo: PhotoRecord) -> "PhotoResponse":
        return cls(
            id=photo.id,
            event_id=photo.event_id,
            url=photo.url,
            status=photo.status,
            face_count=photo.face_count,
            created_at=photo.created_at,
        )


class UploadResponse(BaseModel):
    """Result of a batch upload."""

    photos: list[PhotoResponse]
    failed_count: int
    message: str


class MatchResponse(BaseModel):
    """Photos matching a selfie."""

    photos: list[PhotoResponse]
    processing_count: int


class DeleteResponse(BaseModel):
    """Result of a deletion cascade."""

    photos_removed: int
    storage_failures: int

    @classmethod
    def from_report(cls, report: CascadeReport) -> "DeleteResponse":
        return cls(
            photos_removed=report.photos_removed,
            storage_failures=len(report.storage_failures),
        )
