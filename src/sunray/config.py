"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = {"json", "supabase"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    timezone: str = "UTC"
    log_level: str = "INFO"
    storage_backend: str = "json"
    data_dir: Path = Path(".sunray")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    profile_id: str = "default"
    weather_base_url: str = "https://api.open-meteo.com/v1"
    geocode_base_url: str = "https://nominatim.openstreetmap.org"
    geocode_user_agent: str = "sunray/0.1"
    http_timeout_seconds: float = 10
    geocode_min_distance_m: float = 500
    geocode_min_interval_seconds: float = 600
    location_authorized: bool | None = None

    model_config = SettingsConfigDict(
        env_prefix="SUNRAY_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the storage backend name, falling back to JSON files."""
    if raw is None:
        return "json"
    cleaned = raw.strip().lower()
    if cleaned in STORAGE_BACKENDS:
        return cleaned
    raise ValueError(f"Unknown storage backend: {raw!r}")
