"""Error taxonomy for the ingestion and matching pipeline."""

from uuid import UUID


class GalleryError(Exception):
    """Base class for pipeline errors."""


class InvalidRequestError(GalleryError):
    """Request failed validation before any side effect happened."""


class InvalidTargetError(InvalidRequestError):
    """Event identifier is missing or malformed."""


class EventNotFoundError(InvalidTargetError):
    """Event identifier is well-formed but no such event exists."""

    def __init__(self, event_id: UUID) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class MissingPayloadError(InvalidRequestError):
    """Request carried no usable image payload."""


class EventExpiredError(GalleryError):
    """Event is past its retention window and accepts no uploads or queries."""

    def __init__(self, event_id: UUID) -> None:
        super().__init__(f"Event {event_id} is expired")
        self.event_id = event_id


class StorageFailureError(GalleryError):
    """Object store rejected a write or delete."""


class NoImagesSucceededError(GalleryError):
    """Every image of an upload batch failed."""

    def __init__(self, failures: list[object]) -> None:
        super().__init__(f"Could not save any photos ({len(failures)} failed)")
        self.failures = failures


class NoFaceDetectedError(GalleryError):
    """Selfie contained no detectable face."""


class ExtractionFailureError(GalleryError):
    """Descriptor extraction failed for an image."""


class InvalidDescriptorError(ExtractionFailureError):
    """Extractor returned a vector of the wrong shape or with bad values."""
