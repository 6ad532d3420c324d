"""Pydantic models for API request payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from sunray.domain.models import SkinType
from sunray.services.location import AuthorizationStatus


class StartSessionRequest(BaseModel):
    """Start an exposure session; omitted values use the user defaults."""

    spf: int | None = Field(default=None, ge=0)
    exposed_percent: float | None = Field(default=None, ge=0, le=100)


class AdjustSessionRequest(BaseModel):
    """New protection values for the active session."""

    spf: int = Field(ge=0)
    exposed_percent: float = Field(ge=0, le=100)


class PositionFixPayload(BaseModel):
    """Position fix reported by the client device."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp: datetime | None = None
    horizontal_accuracy: float | None = Field(default=None, ge=0)


class AuthorizationPayload(BaseModel):
    """Location authorization reported by the client device."""

    status: AuthorizationStatus


class UserSettingsPayload(BaseModel):
    """User defaults for exposure sessions."""

    skin_type: SkinType = SkinType.III
    default_spf: int = Field(default=15, ge=0)
    default_exposed_percent: float = Field(default=25, ge=0, le=100)
    daily_goal_iu: float = Field(default=800, gt=0)
