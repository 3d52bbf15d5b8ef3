"""Tests for container wiring."""

import asyncio

import pytest

from event_gallery.adapters.http_descriptor_extractor import HttpxDescriptorExtractor
from event_gallery.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.ingestion_service.storage_prefix == "starshot"
    assert container.event_service.retention_days_options == (30, 60, 90)
    assert container.processing_queue.idle_delay_seconds == 0.0
    assert isinstance(
        container.match_service.descriptor_service.extractor,
        HttpxDescriptorExtractor,
    )
    asyncio.run(container.close_resources())


def test_build_container_rejects_unknown_backend(settings) -> None:
    settings.descriptor_backend = "magic"

    with pytest.raises(ValueError, match="magic"):
        build_container(settings)
