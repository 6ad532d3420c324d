"""Nominatim reverse-geocoding client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ReverseGeocodeClient(Protocol):
    """Interface for reverse-geocode lookups."""

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        """Return the raw place payload for a position."""


@dataclass
class HttpxNominatimClient(ReverseGeocodeClient):
    """HTTPX-backed Nominatim client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10
    ) -> "HttpxNominatimClient":
        """Create a geocode client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def reverse(self, latitude: float, longitude: float) -> dict[str, object]:
        """Look up the place containing a position."""
        response = await self.http_client.get(
            f"{self.base_url}/reverse",
            params={"format": "jsonv2", "lat": latitude, "lon": longitude},
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
