"""Health-record store integration."""

import logging
from dataclasses import dataclass
from typing import Protocol

from sunray.domain.models import PositionFix
from sunray.services.errors import DataUnavailableError, PermissionDeniedError

_logger = logging.getLogger(__name__)


class HealthRecordStore(Protocol):
    """Interface for the device-managed health ledger."""

    def request_authorization(self) -> bool:
        """Ask for write/read access and return whether it was granted.

        Raises DataUnavailableError when no health ledger exists at all.
        """

    def record_exposure(
        self, duration_minutes: int, uv_index: float, position: PositionFix | None
    ) -> None:
        """Write a UV exposure sample."""

    def read_today_dietary_intake(self) -> float:
        """Return today's dietary vitamin D intake in IU."""


class NoOpHealthRecordStore(HealthRecordStore):
    """Health store used where no health ledger is available."""

    def request_authorization(self) -> bool:
        raise DataUnavailableError("No health store configured")

    def record_exposure(
        self, duration_minutes: int, uv_index: float, position: PositionFix | None
    ) -> None:
        return None

    def read_today_dietary_intake(self) -> float:
        return 0.0


@dataclass
class HealthService:
    """Best-effort access to the health-record store."""

    store: HealthRecordStore
    authorized: bool = False

    def authorize(self) -> bool:
        """Request authorization; failures count as not authorized.

        A refusal, whether the store returns False or raises
        PermissionDeniedError, propagates as PermissionDeniedError so the caller
        can surface it. A missing or broken store is not a refusal.
        """
        self.authorized = False
        try:
            granted = bool(self.store.request_authorization())
        except PermissionDeniedError:
            raise
        except DataUnavailableError as exc:
            _logger.info("Health store unavailable: %s", exc)
            return False
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Health store authorization failed: %s", exc)
            return False
        if not granted:
            raise PermissionDeniedError("Health access declined")
        self.authorized = True
        return True

    def record_exposure(
        self, duration_minutes: int, uv_index: float, position: PositionFix | None
    ) -> bool:
        """Write an exposure sample, returning False when it was not stored."""
        if duration_minutes <= 0 or uv_index <= 0:
            return False
        try:
            self.store.record_exposure(duration_minutes, uv_index, position)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Health record write failed: %s", exc)
            return False
        return True

    def dietary_intake_today(self) -> float:
        """Return today's dietary intake or 0 when it cannot be read."""
        try:
            return float(self.store.read_today_dietary_intake())
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Dietary intake read failed: %s", exc)
            return 0.0
