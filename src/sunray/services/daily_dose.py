"""Accumulated daily vitamin D dose."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from sunray.domain.models import ExposureSession


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DailyDoseLedger:
    """Running total of IU synthesized today in the user's timezone."""

    timezone_name: str = "UTC"
    clock: Callable[[], datetime] = _utc_now
    day: date | None = None
    total_iu: float = 0.0
    _tz: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._tz = ZoneInfo(self.timezone_name)

    def today(self) -> date:
        """Return the current local date."""
        return self.clock().astimezone(self._tz).date()

    def add(self, iu: float) -> float:
        """Add a finalized dose and return the new total."""
        self._roll_over()
        self.total_iu += max(0.0, iu)
        return self.total_iu

    def total(self) -> float:
        """Return today's total, resetting it after a day boundary."""
        self._roll_over()
        return self.total_iu

    def seed(self, history: Iterable[ExposureSession]) -> float:
        """Rebuild today's total from finalized sessions that ended today."""
        today = self.today()
        self.day = today
        self.total_iu = sum(
            session.estimated_iu or 0.0
            for session in history
            if session.end is not None
            and session.end.astimezone(self._tz).date() == today
        )
        return self.total_iu

    def _roll_over(self) -> None:
        today = self.today()
        if self.day != today:
            self.day = today
            self.total_iu = 0.0
