"""Open-Meteo weather API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class WeatherClient(Protocol):
    """Interface for current weather lookups."""

    async def get_current(self, latitude: float, longitude: float) -> dict[str, object]:
        """Return the raw current-conditions payload for a position."""


@dataclass
class HttpxOpenMeteoClient(WeatherClient):
    """HTTPX-backed Open-Meteo client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 10
    ) -> "HttpxOpenMeteoClient":
        """Create a weather client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_current(self, latitude: float, longitude: float) -> dict[str, object]:
        """Fetch current UV index and cloud cover."""
        response = await self.http_client.get(
            f"{self.base_url}/forecast",
            params={
                "latitude": latitude,
                "longitude": longitude,
                "current": "uv_index,cloud_cover",
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
