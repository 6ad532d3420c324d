"""Approximate solar position."""

import math
from datetime import UTC, datetime

_AXIAL_TILT_DEGREES = 23.44


def solar_elevation(latitude: float, longitude: float, when: datetime) -> float:
    """Approximate the sun's elevation above the horizon in degrees.

    Uses the noon elevation for the day's declination, scaled by a sine curve
    over a 14-hour day starting at 06:00 local solar time. Never negative.
    """
    utc_when = when.astimezone(UTC)
    day_of_year = utc_when.timetuple().tm_yday
    declination = -_AXIAL_TILT_DEGREES * math.cos(
        math.radians(360 / 365.0 * (day_of_year + 10))
    )
    noon_elevation = max(0.0, 90.0 - abs(latitude - declination))

    utc_hour = utc_when.hour + utc_when.minute / 60.0 + utc_when.second / 3600.0
    solar_hour = (utc_hour + longitude / 15.0) % 24
    diurnal = max(0.0, math.sin((solar_hour - 6.0) / 14.0 * math.pi))
    return noon_elevation * diurnal
