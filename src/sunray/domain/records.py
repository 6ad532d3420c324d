"""Conversion between domain models and storage records."""

from datetime import datetime
from uuid import UUID

from sunray.domain.models import ExposureSession, SkinType, UserSettings


def settings_to_record(settings: UserSettings) -> dict[str, object]:
    """Serialize settings into a JSON-compatible mapping."""
    return {
        "skin_type": settings.skin_type.value,
        "default_spf": settings.default_spf,
        "default_exposed_percent": settings.default_exposed_percent,
        "daily_goal_iu": settings.daily_goal_iu,
    }


def settings_from_record(record: dict[str, object]) -> UserSettings:
    """Build settings from a stored mapping, keeping defaults for missing keys."""
    defaults = UserSettings()
    return UserSettings(
        skin_type=SkinType(record.get("skin_type", defaults.skin_type.value)),
        default_spf=int(record.get("default_spf", defaults.default_spf)),
        default_exposed_percent=float(
            record.get("default_exposed_percent", defaults.default_exposed_percent)
        ),
        daily_goal_iu=float(record.get("daily_goal_iu", defaults.daily_goal_iu)),
    )


def session_to_record(session: ExposureSession) -> dict[str, object]:
    """Serialize an exposure session into a JSON-compatible mapping."""
    return {
        "id": str(session.id),
        "start": session.start.isoformat(),
        "end": session.end.isoformat() if session.end else None,
        "spf": session.spf,
        "exposed_percent": session.exposed_percent,
        "skin_type": session.skin_type.value,
        "estimated_iu": session.estimated_iu,
    }


def session_from_record(record: dict[str, object]) -> ExposureSession:
    """Build an exposure session from a stored mapping."""
    end = record.get("end")
    estimated_iu = record.get("estimated_iu")
    return ExposureSession(
        id=UUID(str(record["id"])),
        start=datetime.fromisoformat(str(record["start"])),
        end=datetime.fromisoformat(str(end)) if end else None,
        spf=int(record["spf"]),
        exposed_percent=float(record["exposed_percent"]),
        skin_type=SkinType(record["skin_type"]),
        estimated_iu=float(estimated_iu) if estimated_iu is not None else None,
    )
