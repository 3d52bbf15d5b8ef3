"""Event lookup, creation and retirement."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from event_gallery.domain.errors import (
    EventExpiredError,
    EventNotFoundError,
    InvalidRequestError,
    InvalidTargetError,
)
from event_gallery.domain.events import EventRecord
from event_gallery.services.photos import CascadeReport, PhotoService

logger = logging.getLogger(__name__)


class EventRepository(Protocol):
    """Persistence interface for events."""

    def create_event(  # noqa: PLR0913
        self,
        name: str,
        photographer_id: str,
        created_at: datetime,
        expires_at: datetime,
        retention_days: int,
    ) -> EventRecord:
        """Create an active event and return it."""

    def get_event(self, event_id: UUID) -> EventRecord | None:
        """Return an event by id, if present."""

    def list_due_events(self, now: datetime) -> list[EventRecord]:
        """Return unexpired events whose expiry timestamp is at or before now."""

    def mark_expired(self, event_id: UUID) -> None:
        """Set the expiry flag on an event."""


def parse_event_id(raw: object) -> UUID:
    """Parse an event identifier, raising InvalidTargetError when malformed."""
    if isinstance(raw, UUID):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidTargetError("Missing event id")
    try:
        return UUID(raw.strip())
    except ValueError as exc:
        raise InvalidTargetError(f"Invalid event id: {raw!r}") from exc


@dataclass
class EventService:
    """Application service for the event lifecycle."""

    repository: EventRepository
    photo_service: PhotoService
    retention_days_options: tuple[int, ...] = (30, 60, 90)

    def create_event(
        self,
        name: str,
        photographer_id: str,
        retention_days: int,
        now: datetime | None = None,
    ) -> EventRecord:
        """Create an event that expires after one of the allowed retention windows."""
        if retention_days not in self.retention_days_options:
            raise InvalidRequestError(
                f"Retention must be one of {self.retention_days_options} days"
            )
        if not name.strip() or not photographer_id.strip():
            raise InvalidRequestError("Event name and photographer are required")
        created_at = now or datetime.now(tz=UTC)
        return self.repository.create_event(
            name=name.strip(),
            photographer_id=photographer_id,
            created_at=created_at,
            expires_at=created_at + timedelta(days=retention_days),
            retention_days=retention_days,
        )

    def resolve_event(self, raw_event_id: object) -> EventRecord:
        """Return the event for an identifier or raise a validation error."""
        event_id = parse_event_id(raw_event_id)
        event = self.repository.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def resolve_active_event(self, raw_event_id: object) -> EventRecord:
        """Return an event that still accepts uploads and queries."""
        event = self.resolve_event(raw_event_id)
        if event.is_expired:
            raise EventExpiredError(event.id)
        return event

    async def retire_event(self, event: EventRecord) -> CascadeReport:
        """Remove all photos of an event and flag it expired."""
        if event.is_expired:
            return CascadeReport()
        report = await self.photo_service.purge_event_photos(event.id)
        self.repository.mark_expired(event.id)
        # Uploads that passed the expiry check before the flag was set.
        stragglers = await self.photo_service.purge_event_photos(event.id)
        report.photos_removed += stragglers.photos_removed
        report.storage_failures.extend(stragglers.storage_failures)
        logger.info("Event retired", extra={"event_id": str(event.id)})
        return report
