"""Domain models for photographer events."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class EventState(StrEnum):
    """Lifecycle state of an event."""

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class EventRecord:
    """Represents a persisted event."""

    id: UUID
    name: str
    photographer_id: str
    created_at: datetime
    expires_at: datetime
    retention_days: int
    is_expired: bool = False

    @property
    def state(self) -> EventState:
        return EventState.EXPIRED if self.is_expired else EventState.ACTIVE

    def is_due(self, now: datetime) -> bool:
        """Return true when the retention window has run out but the flag is unset."""
        return not self.is_expired and self.expires_at <= now
