"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "event-photos"
    storage_prefix: str = "starshot"
    descriptor_backend: str = "face_recognition"
    descriptor_service_url: str = "http://localhost:8001"
    descriptor_timeout_seconds: float = 60.0
    face_detection_model: str = "hog"
    queue_idle_delay_seconds: float = 0.3
    extraction_timeout_seconds: float = 120.0
    recover_orphans_on_start: bool = True
    reaper_enabled: bool = True
    reaper_interval_seconds: float = 86400.0
    retention_days_options: str = "30,60,90"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_retention_days(raw: str) -> tuple[int, ...]:
    """Parse the allowed event retention windows, in days."""
    days: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit() and int(value) > 0:
            days.add(int(value))
    if not days:
        raise ValueError(f"No valid retention days in {raw!r}")
    return tuple(sorted(days))
