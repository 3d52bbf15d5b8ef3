"""Single-worker queue for background descriptor extraction.

Extraction is memory heavy, so the whole process runs at most one extraction
at a time. Upload handlers enqueue tasks without waiting; one worker task
drains them in FIFO order and writes each photo's terminal status.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from event_gallery.domain.photos import FaceDescriptor, PhotoStatus
from event_gallery.services.descriptors import DescriptorService
from event_gallery.services.photos import PhotoRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionTask:
    """In-memory unit of work pairing a photo with its image bytes."""

    photo_id: UUID
    image_bytes: bytes


class ProcessingQueue:
    """FIFO queue drained by exactly one extraction worker."""

    def __init__(  # noqa: PLR0913
        self,
        descriptor_service: DescriptorService,
        photo_repository: PhotoRepository,
        idle_delay_seconds: float = 0.3,
        task_timeout_seconds: float = 120.0,
        recover_orphans_on_start: bool = True,
    ) -> None:
        self.descriptor_service = descriptor_service
        self.photo_repository = photo_repository
        self.idle_delay_seconds = idle_delay_seconds
        self.task_timeout_seconds = task_timeout_seconds
        self.recover_orphans_on_start = recover_orphans_on_start
        self._tasks: asyncio.Queue[ExtractionTask] = asyncio.Queue()
        self._running = False
        self._worker: asyncio.Task[None] | None = None

    @property
    def pending_count(self) -> int:
        """Number of tasks waiting, not counting the one in flight."""
        return self._tasks.qsize()

    @property
    def is_running(self) -> bool:
        """True while an extraction is in flight."""
        return self._running

    @property
    def is_started(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def enqueue(self, task: ExtractionTask) -> None:
        """Append a task without blocking."""
        self._tasks.put_nowait(task)
        logger.info(
            "Queued extraction",
            extra={"photo_id": str(task.photo_id), "queue_depth": self.pending_count},
        )

    async def start(self) -> None:
        """Start the worker loop."""
        if self.is_started:
            logger.warning("Processing queue already started")
            return
        if self.recover_orphans_on_start:
            self._fail_orphans(datetime.now(tz=UTC))
        self._worker = asyncio.create_task(self._run(), name="extraction-worker")
        logger.info("Processing queue started")

    async def stop(self) -> None:
        """Cancel the worker; tasks still queued are dropped."""
        if self._worker is None:
            return
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
        dropped = self.pending_count
        if dropped:
            logger.warning(
                "Processing queue stopped with pending tasks",
                extra={"dropped": dropped},
            )
        logger.info("Processing queue stopped")

    async def join(self) -> None:
        """Wait until every enqueued task has reached a terminal status."""
        await self._tasks.join()

    async def _run(self) -> None:
        while True:
            task = await self._tasks.get()
            self._running = True
            try:
                await self._process(task)
            finally:
                self._running = False
                self._tasks.task_done()
            # Idle gap between extractions.
            await asyncio.sleep(self.idle_delay_seconds)

    async def _process(self, task: ExtractionTask) -> None:
        # Outside the task timeout: a run abandoned by an earlier timeout must
        # finish before this one starts.
        await self.descriptor_service.wait_idle()
        logger.info(
            "Processing photo",
            extra={"photo_id": str(task.photo_id), "queue_depth": self.pending_count},
        )
        try:
            descriptors = await asyncio.wait_for(
                self.descriptor_service.extract(task.image_bytes),
                timeout=self.task_timeout_seconds,
            )
        except Exception:
            logger.exception(
                "Descriptor extraction failed", extra={"photo_id": str(task.photo_id)}
            )
            self._complete(task.photo_id, PhotoStatus.FAILED, ())
            return
        self._complete(task.photo_id, PhotoStatus.READY, descriptors)

    def _complete(
        self,
        photo_id: UUID,
        status: PhotoStatus,
        descriptors: tuple[FaceDescriptor, ...],
    ) -> None:
        try:
            updated = self.photo_repository.complete_processing(
                photo_id, status, descriptors
            )
        except Exception:
            logger.exception(
                "Failed to record processing status",
                extra={"photo_id": str(photo_id), "status": status.value},
            )
            return
        if not updated:
            logger.warning(
                "Photo was deleted or already completed",
                extra={"photo_id": str(photo_id)},
            )
            return
        logger.info(
            "Photo processed",
            extra={
                "photo_id": str(photo_id),
                "status": status.value,
                "faces": len(descriptors),
            },
        )

    def _fail_orphans(self, started_at: datetime) -> None:
        try:
            orphans = self.photo_repository.list_processing_photos(started_at)
        except Exception:
            logger.exception("Failed to look up orphaned photos")
            return
        for photo in orphans:
            self._complete(photo.id, PhotoStatus.FAILED, ())
        if orphans:
            logger.warning(
                "Marked orphaned photos as failed", extra={"count": len(orphans)}
            )
