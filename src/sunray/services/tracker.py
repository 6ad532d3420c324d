"""Single owner of exposure-tracking state."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import (
    Advisory,
    ExposureSession,
    PlaceDescriptor,
    PositionFix,
    UserSettings,
)
from sunray.services.conditions import ConditionsService
from sunray.services.errors import PermissionDeniedError
from sunray.services.geocoding import GeocodeService
from sunray.services.goals import ExposureRecommendation, recommend
from sunray.services.health import HealthService
from sunray.services.location import AuthorizationStatus, PositionProvider
from sunray.services.sessions import SessionService
from sunray.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)

LOCATION_ADVISORY = Advisory(
    title="Location",
    message="Location permission is required for UV estimation.",
)
HEALTH_ADVISORY = Advisory(
    title="Health",
    message="Health access was declined. Exposures will not be recorded there.",
)


@dataclass(frozen=True)
class TrackerSnapshot:
    """Read-only view of the tracker state."""

    state: str
    active_session: ExposureSession | None
    history: tuple[ExposureSession, ...]
    conditions: CurrentConditions
    place: PlaceDescriptor | None
    position: PositionFix | None
    location_status: AuthorizationStatus
    daily_dose_iu: float
    recommendation: ExposureRecommendation | None
    settings: UserSettings
    health_authorized: bool
    advisories: tuple[Advisory, ...]


SnapshotListener = Callable[[TrackerSnapshot], None]


@dataclass
class ExposureTracker:
    """Wires position updates, conditions, sessions and recommendations.

    All mutations go through this object on one event loop. Listeners are
    called with a fresh snapshot after every mutation.
    """

    position_provider: PositionProvider
    conditions_service: ConditionsService
    geocode_service: GeocodeService
    session_service: SessionService
    settings_service: UserSettingsService
    health_service: HealthService
    advisories: list[Advisory] = field(default_factory=list)
    listeners: list[SnapshotListener] = field(default_factory=list)
    _unsubscribe_position: Callable[[], None] | None = field(default=None, repr=False)

    async def bootstrap(self) -> TrackerSnapshot:
        """Load stored state, request permissions and take a first reading."""
        self.settings_service.load()
        history = self.session_service.load_history()
        self.session_service.ledger.seed(history)

        try:
            await self.position_provider.request_authorization()
        except PermissionDeniedError as exc:
            _logger.warning("Location authorization refused: %s", exc)
            self._advise(LOCATION_ADVISORY)

        try:
            self.health_service.authorize()
        except PermissionDeniedError as exc:
            _logger.warning("Health authorization refused: %s", exc)
            self._advise(HEALTH_ADVISORY)

        if self._unsubscribe_position is None:
            self._unsubscribe_position = self.position_provider.subscribe(
                self.handle_position
            )
        await self.refresh()
        return self.snapshot()

    async def handle_position(self, fix: PositionFix) -> CurrentConditions:
        """Process a new fix: maybe reverse geocode, always refresh conditions."""
        lookup = self.geocode_service.maybe_geocode(fix)
        if lookup is not None:
            lookup.add_done_callback(self._place_resolved)
        conditions = await self.conditions_service.refresh(fix)
        self._notify()
        return conditions

    async def refresh(self) -> CurrentConditions:
        """Refresh conditions for the last known fix."""
        fix = self.position_provider.last_fix
        if fix is None:
            return self.conditions_service.current
        conditions = await self.conditions_service.refresh(fix)
        self._notify()
        return conditions

    def location_authorization_changed(self, status: AuthorizationStatus) -> None:
        """React to a change of location authorization."""
        if status is AuthorizationStatus.DENIED:
            self.geocode_service.clear()
            self._advise(LOCATION_ADVISORY)
        elif LOCATION_ADVISORY in self.advisories:
            self.advisories.remove(LOCATION_ADVISORY)
        self._notify()

    def start(self, spf: int, exposed_percent: float) -> ExposureSession:
        session = self.session_service.start(spf, exposed_percent)
        self._notify()
        return session

    def adjust(self, spf: int, exposed_percent: float) -> ExposureSession | None:
        session = self.session_service.adjust(spf, exposed_percent)
        self._notify()
        return session

    def stop(self) -> ExposureSession | None:
        session = self.session_service.stop(
            self.conditions_service.current, self.position_provider.last_fix
        )
        self._notify()
        return session

    def update_settings(self, settings: UserSettings) -> UserSettings:
        """Replace the user settings and persist them."""
        updated = self.settings_service.update(settings)
        self._notify()
        return updated

    def dietary_intake_today(self) -> float:
        """Return today's dietary vitamin D reported by the health store."""
        return self.health_service.dietary_intake_today()

    def recommendation(self) -> ExposureRecommendation | None:
        return recommend(
            self.conditions_service.current, self.settings_service.settings
        )

    def snapshot(self) -> TrackerSnapshot:
        """Return the current state as an immutable snapshot."""
        return TrackerSnapshot(
            state="active" if self.session_service.is_active else "idle",
            active_session=self.session_service.active,
            history=tuple(self.session_service.history),
            conditions=self.conditions_service.current,
            place=self.geocode_service.place,
            position=self.position_provider.last_fix,
            location_status=self.position_provider.authorization_status,
            daily_dose_iu=self.session_service.ledger.total(),
            recommendation=self.recommendation(),
            settings=self.settings_service.settings,
            health_authorized=self.health_service.authorized,
            advisories=tuple(self.advisories),
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a change listener and return an unsubscribe callable."""
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    async def close(self) -> None:
        """Detach from the position provider and wait for pending lookups."""
        if self._unsubscribe_position is not None:
            self._unsubscribe_position()
            self._unsubscribe_position = None
        await self.geocode_service.drain()

    def _advise(self, advisory: Advisory) -> None:
        if advisory not in self.advisories:
            self.advisories.append(advisory)

    def _place_resolved(self, lookup: asyncio.Task[None]) -> None:
        if not lookup.cancelled():
            self._notify()

    def _notify(self) -> None:
        if not self.listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self.listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.exception("Snapshot listener failed")
