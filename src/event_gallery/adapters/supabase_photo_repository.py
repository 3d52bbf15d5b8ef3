"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from event_gallery.domain.photos import FaceDescriptor, PhotoRecord, PhotoStatus
from event_gallery.services.photos import PhotoRepository

_COLUMNS = "id, event_id, url, storage_handle, status, face_descriptors, created_at"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo record persistence."""

    client: Client

    def create_photo(self, event_id: UUID, url: str, storage_handle: str) -> PhotoRecord:
        """Create a PROCESSING photo row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "event_id": str(event_id),
                    "url": url,
                    "storage_handle": storage_handle,
                    "status": PhotoStatus.PROCESSING.value,
                    "face_descriptors": [],
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo record")
        return _parse_row(response.data[0])

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_event_photos(self, event_id: UUID) -> list[PhotoRecord]:
        """Return all photos of an event, newest first."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("event_id", str(event_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def complete_processing(
        self,
        photo_id: UUID,
        status: PhotoStatus,
        descriptors: tuple[FaceDescriptor, ...],
    ) -> bool:
        """Write the terminal status, only while the row is still PROCESSING."""
        response = (
            self.client.table("photos")
            .update(
                {
                    "status": status.value,
                    "face_descriptors": [
                        descriptor.as_list() for descriptor in descriptors
                    ],
                }
            )
            .eq("id", str(photo_id))
            .eq("status", PhotoStatus.PROCESSING.value)
            .execute()
        )
        return bool(response.data)

    def list_processing_photos(self, created_before: datetime) -> list[PhotoRecord]:
        """Return PROCESSING photos created before a timestamp."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("status", PhotoStatus.PROCESSING.value)
            .lt("created_at", created_before.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_photo(self, photo_id: UUID) -> bool:
        """Delete a photo row."""
        response = (
            self.client.table("photos").delete().eq("id", str(photo_id)).execute()
        )
        return bool(response.data)

    def delete_photos(self, photo_ids: list[UUID]) -> int:
        """Delete the given photo rows."""
        if not photo_ids:
            return 0
        response = (
            self.client.table("photos")
            .delete()
            .in_("id", [str(photo_id) for photo_id in photo_ids])
            .execute()
        )
        return len(response.data or [])


def _parse_row(row: dict[str, object]) -> PhotoRecord:
    raw_descriptors = row.get("face_descriptors") or []
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return PhotoRecord(
        id=UUID(str(row["id"])),
        event_id=UUID(str(row["event_id"])),
        url=str(row["url"]),
        storage_handle=str(row["storage_handle"]),
        status=PhotoStatus(row["status"]),
        descriptors=tuple(
            FaceDescriptor.from_values(values)
            for values in raw_descriptors  # type: ignore[union-attr]
        ),
        created_at=created_at,
    )
