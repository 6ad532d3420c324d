"""Domain models for exposure tracking."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4


class SkinType(str, Enum):
    """Fitzpatrick skin-response classification."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"

    @property
    def display_name(self) -> str:
        """Human-readable label for the classification."""
        return _SKIN_TYPE_NAMES[self]

    @property
    def synthesis_factor(self) -> float:
        """Relative synthesis rate, highest for the most UV-sensitive skin."""
        return _SKIN_TYPE_FACTORS[self]


_SKIN_TYPE_NAMES = {
    SkinType.I: "Type I (Very fair)",
    SkinType.II: "Type II (Fair)",
    SkinType.III: "Type III (Medium)",
    SkinType.IV: "Type IV (Olive)",
    SkinType.V: "Type V (Brown)",
    SkinType.VI: "Type VI (Dark brown/black)",
}

_SKIN_TYPE_FACTORS = {
    SkinType.I: 1.0,
    SkinType.II: 0.9,
    SkinType.III: 0.75,
    SkinType.IV: 0.6,
    SkinType.V: 0.45,
    SkinType.VI: 0.35,
}


@dataclass(frozen=True)
class UserSettings:
    """User defaults for exposure sessions."""

    skin_type: SkinType = SkinType.III
    default_spf: int = 15
    default_exposed_percent: float = 25.0
    daily_goal_iu: float = 800.0


@dataclass(frozen=True)
class ExposureSession:
    """A single sun exposure session.

    ``end`` and ``estimated_iu`` stay unset while the session is active and are
    both filled in when it is finalized.
    """

    start: datetime
    spf: int
    exposed_percent: float
    skin_type: SkinType
    end: datetime | None = None
    estimated_iu: float | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def is_finalized(self) -> bool:
        """Return True once the session has an end timestamp."""
        return self.end is not None

    def duration_minutes(self, now: datetime | None = None) -> int:
        """Return whole elapsed minutes, measured to ``end`` or ``now``."""
        finish = self.end or now
        if finish is None:
            return 0
        return max(0, int((finish - self.start).total_seconds() // 60))


@dataclass(frozen=True)
class PositionFix:
    """A position reported by the location provider."""

    latitude: float
    longitude: float
    timestamp: datetime
    horizontal_accuracy: float | None = None


@dataclass(frozen=True)
class PlaceDescriptor:
    """Result of a reverse-geocode lookup."""

    locality: str | None
    country: str | None
    display_name: str = ""

    @property
    def summary(self) -> str:
        """Join the known locality and country for display."""
        parts = [part for part in (self.locality, self.country) if part]
        return ", ".join(parts) or self.display_name


@dataclass(frozen=True)
class Advisory:
    """User-visible notice for a degraded but non-fatal condition."""

    title: str
    message: str
