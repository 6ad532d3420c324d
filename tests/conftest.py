"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from sunray.adapters.nominatim_client import ReverseGeocodeClient
from sunray.adapters.open_meteo_client import WeatherClient
from sunray.adapters.position_provider import InMemoryPositionProvider
from sunray.config import Settings
from sunray.containers import AppContainer
from sunray.domain.models import ExposureSession, PositionFix, UserSettings
from sunray.services.conditions import ConditionsService
from sunray.services.daily_dose import DailyDoseLedger
from sunray.services.errors import HealthStoreWriteError, PersistenceError
from sunray.services.geocoding import GeocodeService
from sunray.services.health import HealthRecordStore, HealthService
from sunray.services.location import AuthorizationStatus
from sunray.services.sessions import HistoryStore, SessionService
from sunray.services.tracker import ExposureTracker
from sunray.services.user_settings import SettingsStore, UserSettingsService

NOON = datetime(2024, 6, 21, 12, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = NOON

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeWeatherClient(WeatherClient):
    """Weather client returning a fixed Open-Meteo payload."""

    uv_index: float = 5.4
    cloud_cover_percent: float | None = 20
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def get_current(self, latitude: float, longitude: float) -> dict[str, object]:
        self.calls.append((latitude, longitude))
        current: dict[str, object] = {"uv_index": self.uv_index}
        if self.cloud_cover_percent is not None:
            current["cloud_cover"] = self.cloud_cover_percent
        return {"current": current}


class FailingWeatherClient(WeatherClient):
    """Weather client that always times out."""

    async def get_current(self, latitude: float, longitude: float) -> dict[str, object]:
        raise TimeoutError("weather timeout")


@dataclass
class FakeGeocodeClient(ReverseGeocodeClient):
    """Reverse-geocode client that records lookups."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "display_name": "Lisboa, Portugal",
            "address": {"city": "Lisboa", "country": "Portugal"},
        }
    )
    fail: bool = False
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        self.calls.append((latitude, longitude))
        if self.fail:
            raise RuntimeError("geocoder unavailable")
        return self.payload


@dataclass
class InMemoryStore(SettingsStore, HistoryStore):
    """In-memory settings and history store for tests."""

    settings: UserSettings | None = None
    history: list[ExposureSession] = field(default_factory=list)
    saved_histories: int = 0

    def load_settings(self) -> UserSettings | None:
        return self.settings

    def save_settings(self, settings: UserSettings) -> None:
        self.settings = settings

    def load_history(self) -> list[ExposureSession]:
        return list(self.history)

    def save_history(self, history: list[ExposureSession]) -> None:
        self.history = list(history)
        self.saved_histories += 1


class FailingStore(SettingsStore, HistoryStore):
    """Store whose every operation fails."""

    def load_settings(self) -> UserSettings | None:
        raise PersistenceError("disk unavailable")

    def save_settings(self, settings: UserSettings) -> None:
        raise PersistenceError("disk unavailable")

    def load_history(self) -> list[ExposureSession]:
        raise PersistenceError("disk unavailable")

    def save_history(self, history: list[ExposureSession]) -> None:
        raise PersistenceError("disk unavailable")


@dataclass
class RecordingHealthStore(HealthRecordStore):
    """Health store that records exposures in memory."""

    authorized: bool = True
    dietary_iu: float = 0.0
    fail_writes: bool = False
    exposures: list[tuple[int, float, PositionFix | None]] = field(
        default_factory=list
    )

    def request_authorization(self) -> bool:
        return self.authorized

    def record_exposure(
        self, duration_minutes: int, uv_index: float, position: PositionFix | None
    ) -> None:
        if self.fail_writes:
            raise HealthStoreWriteError("health store locked")
        self.exposures.append((duration_minutes, uv_index, position))

    def read_today_dietary_intake(self) -> float:
        return self.dietary_iu


def make_fix(
    latitude: float = 38.72,
    longitude: float = -9.14,
    timestamp: datetime = NOON,
) -> PositionFix:
    return PositionFix(latitude=latitude, longitude=longitude, timestamp=timestamp)


def build_session_service(
    store: HistoryStore | None = None,
    health_store: HealthRecordStore | None = None,
    clock: FakeClock | None = None,
    settings: UserSettings | None = None,
) -> SessionService:
    resolved_clock = clock or FakeClock()
    settings_service = UserSettingsService(
        InMemoryStore(), settings=settings or UserSettings()
    )
    return SessionService(
        history_store=store or InMemoryStore(),
        health_service=HealthService(health_store or RecordingHealthStore()),
        settings_service=settings_service,
        ledger=DailyDoseLedger(clock=resolved_clock),
        clock=resolved_clock,
    )


def build_tracker(  # noqa: PLR0913
    *,
    weather_client: WeatherClient | None = None,
    geocode_client: ReverseGeocodeClient | None = None,
    store: InMemoryStore | FailingStore | None = None,
    health_store: HealthRecordStore | None = None,
    position_provider: InMemoryPositionProvider | None = None,
    clock: FakeClock | None = None,
) -> ExposureTracker:
    resolved_clock = clock or FakeClock()
    resolved_store = store if store is not None else InMemoryStore()
    settings_service = UserSettingsService(resolved_store)
    health_service = HealthService(health_store or RecordingHealthStore())
    return ExposureTracker(
        position_provider=position_provider
        or InMemoryPositionProvider(status=AuthorizationStatus.AUTHORIZED),
        conditions_service=ConditionsService(weather_client or FakeWeatherClient()),
        geocode_service=GeocodeService(client=geocode_client or FakeGeocodeClient()),
        session_service=SessionService(
            history_store=resolved_store,
            health_service=health_service,
            settings_service=settings_service,
            ledger=DailyDoseLedger(clock=resolved_clock),
            clock=resolved_clock,
        ),
        settings_service=settings_service,
        health_service=health_service,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(storage_backend="json", data_dir=tmp_path, location_authorized=True)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def weather_client() -> FakeWeatherClient:
    return FakeWeatherClient()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def health_store() -> RecordingHealthStore:
    return RecordingHealthStore()


@pytest.fixture
def container(
    settings: Settings,
    weather_client: FakeWeatherClient,
    store: InMemoryStore,
    health_store: RecordingHealthStore,
    clock: FakeClock,
) -> AppContainer:
    position_provider = InMemoryPositionProvider(status=AuthorizationStatus.AUTHORIZED)
    tracker = build_tracker(
        weather_client=weather_client,
        store=store,
        health_store=health_store,
        position_provider=position_provider,
        clock=clock,
    )

    async def close_resources() -> None:
        await tracker.close()

    return AppContainer(
        settings=settings,
        position_provider=position_provider,
        tracker=tracker,
        close_resources=close_resources,
    )
