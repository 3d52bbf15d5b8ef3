"""Supabase-backed event repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from event_gallery.domain.events import EventRecord
from event_gallery.services.events import EventRepository

_COLUMNS = (
    "id, name, photographer_id, created_at, expires_at, retention_days, is_expired"
)


@dataclass
class SupabaseEventRepository(EventRepository):
    """Supabase implementation for event persistence."""

    client: Client

    def create_event(  # noqa: PLR0913
        self,
        name: str,
        photographer_id: str,
        created_at: datetime,
        expires_at: datetime,
        retention_days: int,
    ) -> EventRecord:
        """Create an event row and return it."""
        response = (
            self.client.table("events")
            .insert(
                {
                    "name": name,
                    "photographer_id": photographer_id,
                    "created_at": created_at.isoformat(),
                    "expires_at": expires_at.isoformat(),
                    "retention_days": retention_days,
                    "is_expired": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create event")
        return _parse_row(response.data[0])

    def get_event(self, event_id: UUID) -> EventRecord | None:
        """Return an event by id, if present."""
        response = (
            self.client.table("events")
            .select(_COLUMNS)
            .eq("id", str(event_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_due_events(self, now: datetime) -> list[EventRecord]:
        """Return unexpired events whose expiry is at or before now."""
        response = (
            self.client.table("events")
            .select(_COLUMNS)
            .eq("is_expired", False)
            .lte("expires_at", now.isoformat())
            .order("expires_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def mark_expired(self, event_id: UUID) -> None:
        """Set the expiry flag on an event."""
        self.client.table("events").update({"is_expired": True}).eq(
            "id", str(event_id)
        ).execute()


def _parse_row(row: dict[str, object]) -> EventRecord:
    return EventRecord(
        id=UUID(str(row["id"])),
        name=str(row["name"]),
        photographer_id=str(row["photographer_id"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        expires_at=datetime.fromisoformat(str(row["expires_at"])),
        retention_days=int(row["retention_days"]),  # type: ignore[call-overload]
        is_expired=bool(row.get("is_expired", False)),
    )
