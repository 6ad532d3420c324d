"""Supabase-backed health-record store."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from supabase import Client

from sunray.domain.models import PositionFix
from sunray.services.errors import HealthStoreWriteError
from sunray.services.health import HealthRecordStore


@dataclass
class SupabaseHealthRecordStore(HealthRecordStore):
    """Stores UV exposure samples and reads dietary intake from Supabase."""

    client: Client
    profile_id: str
    timezone_name: str = "UTC"

    def request_authorization(self) -> bool:
        """Supabase access is granted by the service key."""
        return True

    def record_exposure(
        self, duration_minutes: int, uv_index: float, position: PositionFix | None
    ) -> None:
        """Insert a UV exposure sample ending now."""
        end = datetime.now(tz=UTC)
        start = end - timedelta(minutes=duration_minutes)
        row: dict[str, object] = {
            "profile_id": self.profile_id,
            "uv_index": uv_index,
            "duration_minutes": duration_minutes,
            "start_at": start.isoformat(),
            "end_at": end.isoformat(),
        }
        if position is not None:
            row["latitude"] = position.latitude
            row["longitude"] = position.longitude
            row["horizontal_accuracy"] = position.horizontal_accuracy
        response = self.client.table("uv_exposures").insert(row).execute()
        if not response.data:
            raise HealthStoreWriteError("Failed to record UV exposure")

    def read_today_dietary_intake(self) -> float:
        """Sum today's dietary vitamin D samples in IU."""
        tz = ZoneInfo(self.timezone_name)
        now = datetime.now(tz=tz)
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        response = (
            self.client.table("dietary_intake")
            .select("vitamin_d_iu")
            .eq("profile_id", self.profile_id)
            .gte("logged_at", start.astimezone(UTC).isoformat())
            .lt("logged_at", now.astimezone(UTC).isoformat())
            .execute()
        )
        return sum(float(row.get("vitamin_d_iu") or 0) for row in response.data or [])
