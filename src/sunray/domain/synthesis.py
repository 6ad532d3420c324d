"""Vitamin D synthesis model.

Converts instantaneous exposure parameters into an estimated dose in IU and
inverts the same rate to find the minutes needed to reach a goal. The model is
a product of independent attenuation factors applied to a base rate:

    rate = 20 IU/min * UV * SPF * elevation * cloud * skin * exposed area

Every factor is clamped so the result is never negative. The inverse assumes
conditions stay constant for the whole duration, which is inaccurate near
sunrise and sunset.
"""

import math

BASE_IU_PER_MINUTE_AT_UV1 = 20.0
ELEVATION_SATURATION_DEGREES = 60.0
MIN_CLOUD_TRANSMISSION = 0.3


def attenuation_for_spf(spf: int) -> float:
    """Return the fraction of UV passing through sunscreen.

    SPF 0 and 1 mean no protection.
    """
    if spf <= 1:
        return 1.0
    return 1.0 / spf


def solar_elevation_factor(degrees: float) -> float:
    """Scale UV flux by sun height, saturating at 60 degrees."""
    return _clamp_unit(degrees / ELEVATION_SATURATION_DEGREES)


def cloud_cover_factor(cloud_cover: float) -> float:
    """Return the transmitted fraction of clear-sky UV for a cloud fraction."""
    return max(MIN_CLOUD_TRANSMISSION, 1.0 - 0.5 * cloud_cover)


def exposed_area_factor(exposed_percent: float) -> float:
    """Convert an exposed-skin percentage into a 0-1 fraction."""
    return _clamp_unit(exposed_percent / 100.0)


def iu_per_minute(  # noqa: PLR0913
    uv_index: float,
    solar_elevation: float,
    cloud_cover: float,
    skin_factor: float,
    spf: int,
    exposed_percent: float,
) -> float:
    """Return the instantaneous synthesis rate in IU per minute."""
    return (
        BASE_IU_PER_MINUTE_AT_UV1
        * uv_index
        * attenuation_for_spf(spf)
        * solar_elevation_factor(solar_elevation)
        * cloud_cover_factor(cloud_cover)
        * skin_factor
        * exposed_area_factor(exposed_percent)
    )


def synthesized_iu(  # noqa: PLR0913
    uv_index: float,
    minutes: float,
    solar_elevation: float,
    cloud_cover: float,
    skin_factor: float,
    spf: int,
    exposed_percent: float,
) -> float:
    """Estimate the IU synthesized over ``minutes`` at fixed conditions."""
    if uv_index <= 0 or minutes <= 0 or exposed_percent <= 0:
        return 0.0
    rate = iu_per_minute(
        uv_index, solar_elevation, cloud_cover, skin_factor, spf, exposed_percent
    )
    return max(0.0, rate * minutes)


def recommended_minutes_for_goal(  # noqa: PLR0913
    current_uv: float,
    solar_elevation: float,
    cloud_cover: float,
    skin_factor: float,
    spf: int,
    exposed_percent: float,
    goal_iu: float,
) -> float:
    """Return the minutes needed to reach ``goal_iu``.

    Returns ``math.inf`` when the goal cannot be reached at the current rate.
    """
    if current_uv <= 0:
        return math.inf
    rate = iu_per_minute(
        current_uv, solar_elevation, cloud_cover, skin_factor, spf, exposed_percent
    )
    if rate <= 0:
        return math.inf
    return goal_iu / rate


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))
