"""Throttled reverse geocoding of position fixes."""

import asyncio
import logging
import math
from dataclasses import dataclass, field

from sunray.adapters.nominatim_client import ReverseGeocodeClient
from sunray.domain.models import PlaceDescriptor, PositionFix
from sunray.services.errors import DataUnavailableError

EARTH_RADIUS_M = 6_371_008.8
DEFAULT_MIN_DISTANCE_M = 500.0
DEFAULT_MIN_INTERVAL_SECONDS = 600.0

_LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality", "suburb")

_logger = logging.getLogger(__name__)


def distance_m(first: PositionFix, second: PositionFix) -> float:
    """Return the great-circle distance between two fixes in metres."""
    lat1 = math.radians(first.latitude)
    lat2 = math.radians(second.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(second.longitude - first.longitude)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


@dataclass
class GeocodeThrottleState:
    """Position and time of the last dispatched lookup."""

    last_fix: PositionFix | None = None


@dataclass
class GeocodeThrottle:
    """Decides whether a fix warrants a new reverse-geocode lookup."""

    min_distance_m: float = DEFAULT_MIN_DISTANCE_M
    min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS
    state: GeocodeThrottleState = field(default_factory=GeocodeThrottleState)

    def should_geocode(self, fix: PositionFix) -> bool:
        """Return True when the fix is far enough or late enough."""
        last = self.state.last_fix
        if last is None:
            return True
        if distance_m(last, fix) >= self.min_distance_m:
            return True
        elapsed = (fix.timestamp - last.timestamp).total_seconds()
        return elapsed >= self.min_interval_seconds

    def claim(self, fix: PositionFix) -> bool:
        """Record the fix as looked up when a lookup is warranted."""
        if not self.should_geocode(fix):
            return False
        self.state = GeocodeThrottleState(last_fix=fix)
        return True


@dataclass
class GeocodeService:
    """Dispatches throttled lookups and publishes the resolved place."""

    client: ReverseGeocodeClient
    throttle: GeocodeThrottle = field(default_factory=GeocodeThrottle)
    place: PlaceDescriptor | None = None
    _pending: set[asyncio.Task[None]] = field(default_factory=set, repr=False)

    def maybe_geocode(self, fix: PositionFix) -> asyncio.Task[None] | None:
        """Start a background lookup for the fix if the throttle allows it."""
        if not self.throttle.claim(fix):
            return None
        task = asyncio.get_running_loop().create_task(self._lookup(fix))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for lookups still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def clear(self) -> None:
        """Forget the published place."""
        self.place = None

    async def _lookup(self, fix: PositionFix) -> None:
        try:
            payload = await self.client.reverse(fix.latitude, fix.longitude)
            place = _parse_place(payload)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Reverse geocode failed: %s", exc)
            return
        self.place = place


def _parse_place(payload: dict[str, object]) -> PlaceDescriptor:
    """Build a place descriptor from a Nominatim payload."""
    if "error" in payload:
        raise DataUnavailableError(str(payload["error"]))
    address = payload.get("address")
    if not isinstance(address, dict):
        address = {}
    locality = next(
        (str(address[key]) for key in _LOCALITY_KEYS if address.get(key)), None
    )
    country = address.get("country")
    return PlaceDescriptor(
        locality=locality,
        country=str(country) if country else None,
        display_name=str(payload.get("display_name", "")),
    )
