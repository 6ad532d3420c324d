"""In-process position provider fed by the HTTP surface."""

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field

from sunray.domain.models import PositionFix
from sunray.services.errors import PermissionDeniedError
from sunray.services.location import (
    AuthorizationStatus,
    PositionListener,
    PositionProvider,
)


@dataclass
class InMemoryPositionProvider(PositionProvider):
    """Position provider whose fixes and authorization are pushed by a client."""

    status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED
    fix: PositionFix | None = None
    listeners: list[PositionListener] = field(default_factory=list)

    @property
    def authorization_status(self) -> AuthorizationStatus:
        return self.status

    @property
    def last_fix(self) -> PositionFix | None:
        return self.fix

    async def request_authorization(self) -> AuthorizationStatus:
        """Return the status reported by the client, raising when denied."""
        if self.status is AuthorizationStatus.DENIED:
            raise PermissionDeniedError("Location permission denied or restricted")
        return self.status

    def set_authorization(self, status: AuthorizationStatus) -> None:
        """Record the authorization reported by the client."""
        self.status = status
        if status is AuthorizationStatus.DENIED:
            self.fix = None

    def subscribe(self, listener: PositionListener) -> Callable[[], None]:
        """Register a fix listener."""
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    async def publish(self, fix: PositionFix) -> None:
        """Deliver a fix to every listener in registration order."""
        if self.status is AuthorizationStatus.DENIED:
            raise PermissionDeniedError("Location permission denied or restricted")
        self.fix = fix
        for listener in list(self.listeners):
            result = listener(fix)
            if inspect.isawaitable(result):
                await result
