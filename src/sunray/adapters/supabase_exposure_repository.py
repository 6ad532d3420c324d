"""Supabase-backed settings and history repositories."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from sunray.domain.models import ExposureSession, UserSettings
from sunray.domain.records import (
    session_from_record,
    session_to_record,
    settings_from_record,
    settings_to_record,
)
from sunray.services.sessions import HistoryStore
from sunray.services.user_settings import SettingsStore


@dataclass
class SupabaseSettingsRepository(SettingsStore):
    """Supabase implementation for user settings."""

    client: Client
    profile_id: str

    def load_settings(self) -> UserSettings | None:
        """Return the stored settings for the profile."""
        response = (
            self.client.table("user_settings")
            .select("*")
            .eq("profile_id", self.profile_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return settings_from_record(response.data[0])

    def save_settings(self, settings: UserSettings) -> None:
        """Insert or update the profile's settings."""
        self.client.table("user_settings").upsert(
            {
                "profile_id": self.profile_id,
                **settings_to_record(settings),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="profile_id",
        ).execute()


@dataclass
class SupabaseHistoryRepository(HistoryStore):
    """Supabase implementation for finalized exposure sessions."""

    client: Client
    profile_id: str

    def load_history(self) -> list[ExposureSession]:
        """Return the profile's sessions, most recent first."""
        response = (
            self.client.table("exposure_sessions")
            .select("*")
            .eq("profile_id", self.profile_id)
            .order("start", desc=True)
            .execute()
        )
        return [session_from_record(row) for row in response.data or []]

    def save_history(self, history: list[ExposureSession]) -> None:
        """Upsert every session in the history list."""
        if not history:
            return
        rows = [
            {"profile_id": self.profile_id, **session_to_record(session)}
            for session in history
        ]
        self.client.table("exposure_sessions").upsert(rows, on_conflict="id").execute()
