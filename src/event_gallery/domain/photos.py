"""Domain models for gallery photos and face descriptors."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from event_gallery.domain.errors import InvalidDescriptorError

DESCRIPTOR_DIMENSION = 128
MATCH_THRESHOLD = 0.5


class PhotoStatus(StrEnum):
    """Background processing state of a photo."""

    PROCESSING = "PROCESSING"
    READY = "READY"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not PhotoStatus.PROCESSING


@dataclass(frozen=True)
class FaceDescriptor:
    """Fixed-length feature vector for one detected face."""

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.values) != DESCRIPTOR_DIMENSION:
            raise InvalidDescriptorError(
                f"Expected {DESCRIPTOR_DIMENSION} values, got {len(self.values)}"
            )
        if not all(math.isfinite(value) for value in self.values):
            raise InvalidDescriptorError("Descriptor contains non-finite values")

    @classmethod
    def from_values(cls, raw: Sequence[object]) -> "FaceDescriptor":
        """Build a descriptor from an untyped sequence of numbers."""
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
            raise InvalidDescriptorError("Descriptor must be a sequence of numbers")
        try:
            values = tuple(float(value) for value in raw)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise InvalidDescriptorError("Descriptor must contain numbers") from exc
        return cls(values=values)

    def as_list(self) -> list[float]:
        return list(self.values)


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a persisted event photo."""

    id: UUID
    event_id: UUID
    url: str
    storage_handle: str
    status: PhotoStatus
    descriptors: tuple[FaceDescriptor, ...]
    created_at: datetime

    @property
    def face_count(self) -> int:
        return len(self.descriptors)
