"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from sunray.adapters.json_file_store import JsonFileStore
from sunray.adapters.nominatim_client import HttpxNominatimClient
from sunray.adapters.open_meteo_client import HttpxOpenMeteoClient
from sunray.adapters.position_provider import InMemoryPositionProvider
from sunray.adapters.supabase_exposure_repository import (
    SupabaseHistoryRepository,
    SupabaseSettingsRepository,
)
from sunray.adapters.supabase_health_store import SupabaseHealthRecordStore
from sunray.config import Settings, parse_storage_backend
from sunray.services.conditions import ConditionsService
from sunray.services.daily_dose import DailyDoseLedger
from sunray.services.geocoding import GeocodeService, GeocodeThrottle
from sunray.services.health import (
    HealthRecordStore,
    HealthService,
    NoOpHealthRecordStore,
)
from sunray.services.location import AuthorizationStatus
from sunray.services.sessions import HistoryStore, SessionService
from sunray.services.tracker import ExposureTracker
from sunray.services.user_settings import SettingsStore, UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    position_provider: InMemoryPositionProvider
    tracker: ExposureTracker
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    settings_store, history_store, health_store = _build_stores(resolved_settings)

    weather_client = HttpxOpenMeteoClient.create(
        base_url=resolved_settings.weather_base_url,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    geocode_client = HttpxNominatimClient.create(
        base_url=resolved_settings.geocode_base_url,
        user_agent=resolved_settings.geocode_user_agent,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    position_provider = InMemoryPositionProvider(
        status=_initial_authorization(resolved_settings.location_authorized)
    )
    settings_service = UserSettingsService(settings_store)
    health_service = HealthService(health_store)
    session_service = SessionService(
        history_store=history_store,
        health_service=health_service,
        settings_service=settings_service,
        ledger=DailyDoseLedger(timezone_name=resolved_settings.timezone),
    )
    tracker = ExposureTracker(
        position_provider=position_provider,
        conditions_service=ConditionsService(weather_client),
        geocode_service=GeocodeService(
            client=geocode_client,
            throttle=GeocodeThrottle(
                min_distance_m=resolved_settings.geocode_min_distance_m,
                min_interval_seconds=resolved_settings.geocode_min_interval_seconds,
            ),
        ),
        session_service=session_service,
        settings_service=settings_service,
        health_service=health_service,
    )

    async def close_resources() -> None:
        await tracker.close()
        await weather_client.close()
        await geocode_client.close()

    return AppContainer(
        settings=resolved_settings,
        position_provider=position_provider,
        tracker=tracker,
        close_resources=close_resources,
    )


def _build_stores(
    settings: Settings,
) -> tuple[SettingsStore, HistoryStore, HealthRecordStore]:
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires a URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return (
            SupabaseSettingsRepository(client, settings.profile_id),
            SupabaseHistoryRepository(client, settings.profile_id),
            SupabaseHealthRecordStore(
                client, settings.profile_id, timezone_name=settings.timezone
            ),
        )
    store = JsonFileStore(settings.data_dir)
    return store, store, NoOpHealthRecordStore()


def _initial_authorization(authorized: bool | None) -> AuthorizationStatus:
    if authorized is None:
        return AuthorizationStatus.NOT_DETERMINED
    if authorized:
        return AuthorizationStatus.AUTHORIZED
    return AuthorizationStatus.DENIED
