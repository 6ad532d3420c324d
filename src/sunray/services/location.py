"""Position provider interface."""

from collections.abc import Callable
from enum import Enum
from typing import Protocol

from sunray.domain.models import PositionFix

PositionListener = Callable[[PositionFix], object]


class AuthorizationStatus(str, Enum):
    """Location authorization states."""

    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class PositionProvider(Protocol):
    """Interface for the device location provider."""

    @property
    def authorization_status(self) -> AuthorizationStatus:
        """Return the current authorization status."""

    @property
    def last_fix(self) -> PositionFix | None:
        """Return the most recent fix, if any."""

    async def request_authorization(self) -> AuthorizationStatus:
        """Request access, raising PermissionDeniedError when refused."""

    def subscribe(self, listener: PositionListener) -> Callable[[], None]:
        """Register a listener for new fixes and return an unsubscribe callable."""
