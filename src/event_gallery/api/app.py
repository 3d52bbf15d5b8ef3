"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from event_gallery.api.routes import router
from event_gallery.app_logging import configure_logging
from event_gallery.containers import AppContainer
from event_gallery.domain.errors import (
    EventExpiredError,
    EventNotFoundError,
    ExtractionFailureError,
    GalleryError,
    InvalidRequestError,
    NoFaceDetectedError,
    NoImagesSucceededError,
)

_STATUS_BY_ERROR: list[tuple[type[GalleryError], int]] = [
    (EventNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (EventExpiredError, status.HTTP_410_GONE),
    (NoFaceDetectedError, status.HTTP_400_BAD_REQUEST),
    (ExtractionFailureError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NoImagesSucceededError, status.HTTP_502_BAD_GATEWAY),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        await state_container.processing_queue.start()
        if state_container.settings.reaper_enabled:
            await state_container.expiry_reaper.start()
        yield
        await state_container.expiry_reaper.stop()
        await state_container.processing_queue.stop()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(router)

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(
        request: Request, exc: GalleryError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed", extra={"path": request.url.path, "error": str(exc)}
            )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Simple health check endpoint."""
        state_container: AppContainer = request.app.state.container
        return {
            "status": "ok",
            "queue_depth": state_container.processing_queue.pending_count,
        }

    return app


def _status_for(exc: GalleryError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
