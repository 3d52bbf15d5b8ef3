"""Scheduled retirement of events past their retention window."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from event_gallery.services.events import EventRepository, EventService

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Summary of one expiry sweep."""

    expired_event_ids: list[UUID] = field(default_factory=list)
    failed_event_ids: list[UUID] = field(default_factory=list)
    photos_removed: int = 0
    storage_failures: int = 0


class ExpiryReaper:
    """Expires due events and cascades deletion of their photos."""

    def __init__(
        self,
        event_service: EventService,
        event_repository: EventRepository,
        interval_seconds: float = 86400.0,
    ) -> None:
        self.event_service = event_service
        self.event_repository = event_repository
        self.interval_seconds = interval_seconds
        self._loop_task: asyncio.Task[None] | None = None

    async def sweep(self, now: datetime | None = None) -> SweepReport:
        """Retire every unexpired event whose expiry timestamp is at or before now."""
        sweep_time = now or datetime.now(tz=UTC)
        report = SweepReport()
        due_events = self.event_repository.list_due_events(sweep_time)
        logger.info(
            "Expiry sweep started",
            extra={"due_events": len(due_events), "now": sweep_time.isoformat()},
        )
        for event in due_events:
            try:
                cascade = await self.event_service.retire_event(event)
            except Exception:
                logger.exception(
                    "Failed to expire event", extra={"event_id": str(event.id)}
                )
                report.failed_event_ids.append(event.id)
                continue
            report.expired_event_ids.append(event.id)
            report.photos_removed += cascade.photos_removed
            report.storage_failures += len(cascade.storage_failures)
        logger.info(
            "Expiry sweep finished",
            extra={
                "expired": len(report.expired_event_ids),
                "failed": len(report.failed_event_ids),
                "photos_removed": report.photos_removed,
            },
        )
        return report

    async def start(self) -> None:
        """Sweep now, then again every interval, in the background."""
        if self._loop_task is not None and not self._loop_task.done():
            return
        self._loop_task = asyncio.create_task(self._run(), name="expiry-reaper")

    async def stop(self) -> None:
        if self._loop_task is None:
            return
        self._loop_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._loop_task
        self._loop_task = None

    async def _run(self) -> None:
        while True:
            try:
                await self.sweep()
            except Exception:
                logger.exception("Expiry sweep failed")
            await asyncio.sleep(self.interval_seconds)
