"""Exposure goal recommendations."""

import math
from dataclasses import dataclass

from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import UserSettings
from sunray.domain.synthesis import recommended_minutes_for_goal

HIGH_ENOUGH_UV = 3.0

_UV_BANDS = (
    (3.0, "Low", "Low risk. Synthesis may be limited."),
    (6.0, "Moderate", "Moderate. Short exposure advised."),
    (8.0, "High", "High. Use protection."),
    (11.0, "Very High", "Very high. Limit exposure."),
)


@dataclass(frozen=True)
class ExposureRecommendation:
    """Suggested exposure to reach the daily goal."""

    duration_minutes: int
    window: str


def recommend(
    conditions: CurrentConditions, settings: UserSettings
) -> ExposureRecommendation | None:
    """Return the suggested exposure for the current conditions, if any."""
    if conditions.uv_index is None:
        return None
    minutes = recommended_minutes_for_goal(
        current_uv=conditions.uv_index,
        solar_elevation=conditions.solar_elevation_or_zero(),
        cloud_cover=conditions.cloud_cover_or_zero(),
        skin_factor=settings.skin_type.synthesis_factor,
        spf=settings.default_spf,
        exposed_percent=settings.default_exposed_percent,
        goal_iu=settings.daily_goal_iu,
    )
    if not math.isfinite(minutes) or minutes <= 0:
        return None
    window = "now" if conditions.uv_index >= HIGH_ENOUGH_UV else "later today"
    return ExposureRecommendation(
        duration_minutes=math.floor(minutes + 0.5), window=window
    )


def uv_risk_category(uv_index: float) -> str:
    """Return the WHO risk band for a UV index."""
    for upper, category, _ in _UV_BANDS:
        if uv_index < upper:
            return category
    return "Extreme"


def uv_advisory(uv_index: float) -> str:
    """Return a one-line advisory for a UV index."""
    for upper, _, advisory in _UV_BANDS:
        if uv_index < upper:
            return advisory
    return "Extreme. Avoid exposure."
