"""Upload, match and delete endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from event_gallery.api.models import (
    DeleteResponse,
    MatchResponse,
    PhotoResponse,
    UploadResponse,
)
from event_gallery.services.ingestion import ImagePayload

if TYPE_CHECKING:
    from event_gallery.containers import AppContainer

router = APIRouter()


@router.post(
    "/photos/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadResponse,
)
async def upload_photos(
    request: Request,
    event_id: str | None = Form(default=None),
    photos: list[UploadFile] | None = File(default=None),
) -> UploadResponse:
    """Store photos for an event and queue face extraction in the background."""
    container: AppContainer = request.app.state.container
    images = [
        ImagePayload(filename=upload.filename or "photo", content=await upload.read())
        for upload in photos or []
    ]
    result = await container.ingestion_service.upload(event_id, images)
    return UploadResponse(
        photos=[PhotoResponse.from_record(photo) for photo in result.photos],
        failed_count=result.failed_count,
        message="Photos uploaded. Face processing is queued in background.",
    )


@router.post("/photos/match", response_model=MatchResponse)
async def match_selfie(
    request: Request,
    event_id: str | None = Form(default=None),
    selfie: UploadFile | None = File(default=None),
) -> MatchResponse:
    """Return the event photos in which the selfie's face appears."""
    container: AppContainer = request.app.state.container
    content = await selfie.read() if selfie is not None else b""
    result = await container.match_service.match(event_id, content)
    return MatchResponse(
        photos=[PhotoResponse.from_record(photo) for photo in result.photos],
        processing_count=result.processing_count,
    )


@router.delete("/photos/{photo_id}", response_model=DeleteResponse)
async def delete_photo(photo_id: UUID, request: Request) -> DeleteResponse:
    """Delete a photo and its stored image."""
    container: AppContainer = request.app.state.container
    report = await container.photo_service.delete_photo(photo_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found"
        )
    return DeleteResponse.from_report(report)


@router.delete("/events/{event_id}", response_model=DeleteResponse)
async def delete_event(event_id: str, request: Request) -> DeleteResponse:
    """Remove every photo of an event and mark it expired."""
    container: AppContainer = request.app.state.container
    event = container.event_service.resolve_event(event_id)
    report = await container.event_service.retire_event(event)
    return DeleteResponse.from_report(report)
