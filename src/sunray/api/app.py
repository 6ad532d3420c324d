"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, Request, status

from sunray.api.models import (
    AdjustSessionRequest,
    AuthorizationPayload,
    PositionFixPayload,
    StartSessionRequest,
    UserSettingsPayload,
)
from sunray.app_logging import configure_logging
from sunray.containers import AppContainer
from sunray.domain.conditions import CurrentConditions
from sunray.domain.models import ExposureSession, PositionFix, UserSettings
from sunray.services.errors import PermissionDeniedError
from sunray.services.goals import uv_advisory, uv_risk_category
from sunray.services.tracker import TrackerSnapshot


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.tracker.bootstrap()
        except Exception:
            logger.exception("Failed to bootstrap exposure tracker")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/state")
    async def state(request: Request) -> dict[str, object]:
        """Return the full tracker state."""
        tracker = _container(request).tracker
        payload = _format_snapshot(tracker.snapshot())
        payload["dietary_intake_iu"] = tracker.dietary_intake_today()
        return payload

    @app.post("/sessions/start")
    async def start_session(
        body: StartSessionRequest, request: Request
    ) -> dict[str, object]:
        """Start an exposure session unless one is already active."""
        tracker = _container(request).tracker
        defaults = tracker.settings_service.settings
        session = tracker.start(
            spf=body.spf if body.spf is not None else defaults.default_spf,
            exposed_percent=(
                body.exposed_percent
                if body.exposed_percent is not None
                else defaults.default_exposed_percent
            ),
        )
        return {"session": _format_session(session)}

    @app.patch("/sessions/active")
    async def adjust_session(
        body: AdjustSessionRequest, request: Request
    ) -> dict[str, object]:
        """Adjust protection on the active session."""
        session = _container(request).tracker.adjust(body.spf, body.exposed_percent)
        return {"session": _format_session(session) if session else None}

    @app.post("/sessions/stop")
    async def stop_session(request: Request) -> dict[str, object]:
        """Stop the active session and return the finalized record."""
        tracker = _container(request).tracker
        session = tracker.stop()
        return {
            "session": _format_session(session) if session else None,
            "daily_dose_iu": tracker.session_service.ledger.total(),
        }

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return finalized sessions, most recent first."""
        sessions = _container(request).tracker.session_service.history
        return {"sessions": [_format_session(session) for session in sessions]}

    @app.post("/location")
    async def report_location(
        body: PositionFixPayload, request: Request
    ) -> dict[str, object]:
        """Accept a position fix and refresh conditions for it."""
        container = _container(request)
        timestamp = body.timestamp or datetime.now(tz=UTC)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        fix = PositionFix(
            latitude=body.latitude,
            longitude=body.longitude,
            timestamp=timestamp,
            horizontal_accuracy=body.horizontal_accuracy,
        )
        try:
            await container.position_provider.publish(fix)
        except PermissionDeniedError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
            ) from exc
        return {
            "conditions": _format_conditions(
                container.tracker.conditions_service.current
            )
        }

    @app.put("/location/authorization")
    async def set_authorization(
        body: AuthorizationPayload, request: Request
    ) -> dict[str, str]:
        """Record the client's location authorization."""
        container = _container(request)
        container.position_provider.set_authorization(body.status)
        container.tracker.location_authorization_changed(body.status)
        return {"status": body.status.value}

    @app.post("/conditions/refresh")
    async def refresh_conditions(request: Request) -> dict[str, object]:
        """Refresh conditions for the last known position."""
        conditions = await _container(request).tracker.refresh()
        return {"conditions": _format_conditions(conditions)}

    @app.get("/settings")
    async def get_settings(request: Request) -> dict[str, object]:
        """Return the user settings."""
        settings = _container(request).tracker.settings_service.settings
        return _format_settings(settings)

    @app.put("/settings")
    async def put_settings(
        body: UserSettingsPayload, request: Request
    ) -> dict[str, object]:
        """Replace the user settings."""
        updated = _container(request).tracker.update_settings(
            UserSettings(
                skin_type=body.skin_type,
                default_spf=body.default_spf,
                default_exposed_percent=body.default_exposed_percent,
                daily_goal_iu=body.daily_goal_iu,
            )
        )
        return _format_settings(updated)

    return app


def _format_snapshot(snapshot: TrackerSnapshot) -> dict[str, object]:
    recommendation = snapshot.recommendation
    return {
        "state": snapshot.state,
        "active_session": (
            _format_session(snapshot.active_session)
            if snapshot.active_session
            else None
        ),
        "history": [_format_session(session) for session in snapshot.history],
        "conditions": _format_conditions(snapshot.conditions),
        "place": snapshot.place.summary if snapshot.place else None,
        "location_authorization": snapshot.location_status.value,
        "daily_dose_iu": snapshot.daily_dose_iu,
        "recommendation": (
            {
                "duration_minutes": recommendation.duration_minutes,
                "window": recommendation.window,
            }
            if recommendation
            else None
        ),
        "settings": _format_settings(snapshot.settings),
        "health_authorized": snapshot.health_authorized,
        "advisories": [
            {"title": advisory.title, "message": advisory.message}
            for advisory in snapshot.advisories
        ],
    }


def _format_session(session: ExposureSession) -> dict[str, object]:
    return {
        "id": str(session.id),
        "start": session.start.isoformat(),
        "end": session.end.isoformat() if session.end else None,
        "spf": session.spf,
        "exposed_percent": session.exposed_percent,
        "skin_type": session.skin_type.value,
        "estimated_iu": session.estimated_iu,
        "duration_minutes": session.duration_minutes(datetime.now(tz=UTC)),
    }


def _format_conditions(conditions: CurrentConditions) -> dict[str, object]:
    known = conditions.is_known
    return {
        "uv_index": conditions.uv_index,
        "cloud_cover": conditions.cloud_cover,
        "solar_elevation": conditions.solar_elevation,
        "uv_category": uv_risk_category(conditions.uv_or_zero()) if known else None,
        "uv_advisory": uv_advisory(conditions.uv_or_zero()) if known else None,
    }


def _format_settings(settings: UserSettings) -> dict[str, object]:
    return {
        "skin_type": settings.skin_type.value,
        "skin_type_name": settings.skin_type.display_name,
        "default_spf": settings.default_spf,
        "default_exposed_percent": settings.default_exposed_percent,
        "daily_goal_iu": settings.daily_goal_iu,
    }
