"""Exposure session lifecycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol

from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import ExposureSession, PositionFix
from sunray.domain.sun import solar_elevation
from sunray.domain.synthesis import synthesized_iu
from sunray.services.daily_dose import DailyDoseLedger
from sunray.services.health import HealthService
from sunray.services.user_settings import UserSettingsService

_logger = logging.getLogger(__name__)


class HistoryStore(Protocol):
    """Persistence interface for finalized sessions."""

    def load_history(self) -> list[ExposureSession]:
        """Return saved sessions, most recent first."""

    def save_history(self, history: list[ExposureSession]) -> None:
        """Persist the full history list."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """State machine for the single active exposure session.

    Idle when ``active`` is None, Active otherwise. Stopping finalizes the
    session, prepends it to ``history`` and returns to Idle even when the
    health store or the history store fails.
    """

    history_store: HistoryStore
    health_service: HealthService
    settings_service: UserSettingsService
    ledger: DailyDoseLedger
    clock: Callable[[], datetime] = _utc_now
    active: ExposureSession | None = None
    history: list[ExposureSession] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.active is not None

    def load_history(self) -> list[ExposureSession]:
        """Load finalized sessions, starting empty when history cannot be read."""
        try:
            self.history = [
                session
                for session in self.history_store.load_history()
                if session.is_finalized
            ]
        except Exception as exc:  # noqa: BLE001
            _logger.warning("History load failed: %s", exc)
            self.history = []
        return self.history

    def start(self, spf: int, exposed_percent: float) -> ExposureSession:
        """Start a session, or return the one already in flight."""
        if self.active is not None:
            return self.active
        self.active = ExposureSession(
            start=self.clock(),
            spf=spf,
            exposed_percent=exposed_percent,
            skin_type=self.settings_service.settings.skin_type,
        )
        _logger.info("Exposure session %s started", self.active.id)
        return self.active

    def adjust(self, spf: int, exposed_percent: float) -> ExposureSession | None:
        """Update protection and exposed skin on the active session."""
        if self.active is None:
            return None
        self.active = replace(self.active, spf=spf, exposed_percent=exposed_percent)
        return self.active

    def stop(
        self, conditions: CurrentConditions, position: PositionFix | None
    ) -> ExposureSession | None:
        """Finalize the active session and record its estimated dose."""
        session = self.active
        if session is None:
            return None

        end = self.clock()
        minutes = max(0, int((end - session.start).total_seconds() // 60))
        uv_index = conditions.uv_or_zero()
        if position is not None:
            elevation = solar_elevation(position.latitude, position.longitude, end)
        else:
            elevation = conditions.solar_elevation_or_zero()
        dose = synthesized_iu(
            uv_index=uv_index,
            minutes=minutes,
            solar_elevation=elevation,
            cloud_cover=conditions.cloud_cover_or_zero(),
            skin_factor=session.skin_type.synthesis_factor,
            spf=session.spf,
            exposed_percent=session.exposed_percent,
        )
        finalized = replace(session, end=end, estimated_iu=dose)

        self.health_service.record_exposure(minutes, uv_index, position)
        self.ledger.add(dose)
        self.history.insert(0, finalized)
        self.active = None
        self._save_history()
        _logger.info(
            "Exposure session %s stopped after %s min (%.1f IU)",
            finalized.id,
            minutes,
            dose,
        )
        return finalized

    def _save_history(self) -> None:
        try:
            self.history_store.save_history(list(self.history))
        except Exception as exc:  # noqa: BLE001
            _logger.warning("History save failed: %s", exc)
