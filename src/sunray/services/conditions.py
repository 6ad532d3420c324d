"""Environmental refresh for UV and cloud cover."""

import logging
from dataclasses import dataclass, field

from sunray.adapters.open_meteo_client import WeatherClient
from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import PositionFix
from sunray.domain.sun import solar_elevation
from sunray.services.errors import DataUnavailableError

DEFAULT_CLOUD_COVER = 0.3

_logger = logging.getLogger(__name__)


@dataclass
class ConditionsService:
    """Fetches and holds the current conditions for the user's position."""

    weather_client: WeatherClient
    current: CurrentConditions = field(default_factory=CurrentConditions.unknown)

    async def refresh(self, fix: PositionFix) -> CurrentConditions:
        """Fetch conditions for a fix, clearing them to unknown on failure."""
        try:
            payload = await self.weather_client.get_current(
                fix.latitude, fix.longitude
            )
            uv_index, cloud_cover = _parse_current(payload)
        except Exception as exc:  # noqa: BLE001
            _logger.warning(
                "Conditions refresh failed at %.3f,%.3f: %s",
                fix.latitude,
                fix.longitude,
                exc,
            )
            self.current = CurrentConditions.unknown()
            return self.current

        self.current = CurrentConditions(
            uv_index=uv_index,
            cloud_cover=cloud_cover,
            solar_elevation=solar_elevation(
                fix.latitude, fix.longitude, fix.timestamp
            ),
        )
        return self.current

    def clear(self) -> None:
        """Forget the current readings."""
        self.current = CurrentConditions.unknown()


def _parse_current(payload: dict[str, object]) -> tuple[float, float]:
    """Extract UV index and cloud fraction from an Open-Meteo payload."""
    current = payload.get("current")
    if not isinstance(current, dict):
        raise DataUnavailableError("Weather payload has no current block")
    uv_value = current.get("uv_index")
    if not isinstance(uv_value, int | float):
        raise DataUnavailableError("Weather payload has no UV index")
    cloud_value = current.get("cloud_cover")
    if isinstance(cloud_value, int | float):
        cloud_cover = min(1.0, max(0.0, float(cloud_value) / 100.0))
    else:
        cloud_cover = DEFAULT_CLOUD_COVER
    return max(0.0, float(uv_value)), cloud_cover
