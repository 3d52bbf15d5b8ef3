"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from event_gallery.adapters.face_recognition_extractor import FaceRecognitionExtractor
from event_gallery.adapters.http_descriptor_extractor import HttpxDescriptorExtractor
from event_gallery.adapters.supabase_event_repository import SupabaseEventRepository
from event_gallery.adapters.supabase_object_store import SupabaseObjectStore
from event_gallery.adapters.supabase_photo_repository import SupabasePhotoRepository
from event_gallery.config import Settings, parse_retention_days
from event_gallery.services.descriptors import DescriptorExtractor, DescriptorService
from event_gallery.services.events import EventService
from event_gallery.services.ingestion import IngestionService
from event_gallery.services.matching import MatchService
from event_gallery.services.photos import PhotoService
from event_gallery.services.processing_queue import ProcessingQueue
from event_gallery.services.reaper import ExpiryReaper


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    event_service: EventService
    photo_service: PhotoService
    ingestion_service: IngestionService
    match_service: MatchService
    processing_queue: ProcessingQueue
    expiry_reaper: ExpiryReaper
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    event_repository = SupabaseEventRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    object_store = SupabaseObjectStore(
        client=supabase_client, bucket=resolved_settings.storage_bucket
    )

    http_extractor: HttpxDescriptorExtractor | None = None
    extractor: DescriptorExtractor
    if resolved_settings.descriptor_backend == "http":
        http_extractor = HttpxDescriptorExtractor.create(
            base_url=resolved_settings.descriptor_service_url,
            timeout_seconds=resolved_settings.descriptor_timeout_seconds,
        )
        extractor = http_extractor
    elif resolved_settings.descriptor_backend == "face_recognition":
        extractor = FaceRecognitionExtractor(
            model=resolved_settings.face_detection_model
        )
    else:
        raise ValueError(
            f"Unknown descriptor backend: {resolved_settings.descriptor_backend}"
        )
    descriptor_service = DescriptorService(extractor)

    photo_service = PhotoService(repository=photo_repository, object_store=object_store)
    event_service = EventService(
        repository=event_repository,
        photo_service=photo_service,
        retention_days_options=parse_retention_days(
            resolved_settings.retention_days_options
        ),
    )
    processing_queue = ProcessingQueue(
        descriptor_service=descriptor_service,
        photo_repository=photo_repository,
        idle_delay_seconds=resolved_settings.queue_idle_delay_seconds,
        task_timeout_seconds=resolved_settings.extraction_timeout_seconds,
        recover_orphans_on_start=resolved_settings.recover_orphans_on_start,
    )
    ingestion_service = IngestionService(
        event_service=event_service,
        photo_repository=photo_repository,
        object_store=object_store,
        queue=processing_queue,
        storage_prefix=resolved_settings.storage_prefix,
    )
    match_service = MatchService(
        event_service=event_service,
        photo_repository=photo_repository,
        descriptor_service=descriptor_service,
    )
    expiry_reaper = ExpiryReaper(
        event_service=event_service,
        event_repository=event_repository,
        interval_seconds=resolved_settings.reaper_interval_seconds,
    )

    async def close_resources() -> None:
        if http_extractor is not None:
            await http_extractor.close()

    return AppContainer(
        settings=resolved_settings,
        event_service=event_service,
        photo_service=photo_service,
        ingestion_service=ingestion_service,
        match_service=match_service,
        processing_queue=processing_queue,
        expiry_reaper=expiry_reaper,
        close_resources=close_resources,
    )
