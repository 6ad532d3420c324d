"""Environmental conditions at the user's position."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentConditions:
    """Latest UV, cloud cover and solar elevation readings.

    A field set to None means the value is unknown. The record is replaced as a
    whole on every refresh so readers never see a partial update.
    """

    uv_index: float | None = None
    cloud_cover: float | None = None
    solar_elevation: float | None = None

    @classmethod
    def unknown(cls) -> "CurrentConditions":
        """Return conditions with every reading unknown."""
        return cls()

    @property
    def is_known(self) -> bool:
        """Return True when a UV reading is available."""
        return self.uv_index is not None

    def uv_or_zero(self) -> float:
        return self.uv_index if self.uv_index is not None else 0.0

    def cloud_cover_or_zero(self) -> float:
        return self.cloud_cover if self.cloud_cover is not None else 0.0

    def solar_elevation_or_zero(self) -> float:
        return self.solar_elevation if self.solar_elevation is not None else 0.0
