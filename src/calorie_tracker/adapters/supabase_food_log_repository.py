"""Supabase repository for the food log."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.food_log import FoodLogEntry
from calorie_tracker.services.food_log import FoodLogRepository

_COLUMNS = "id, user_id, name, calories, protein, timestamp, is_favorite"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log rows."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        calories: float,
        protein: float,
        timestamp: datetime,
        is_favorite: bool,
    ) -> FoodLogEntry:
        """Insert a food log row and return it."""
        response = (
            self.client.table("food_log")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "calories": calories,
                    "protein": protein,
                    "timestamp": timestamp.isoformat(),
                    "is_favorite": is_favorite,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log entry")
        return _parse_entry(response.data[0])

    def get_entry(
        self, user_id: UUID, entry_id: UUID, is_favorite: bool
    ) -> FoodLogEntry | None:
        """Return a row owned by the user."""
        response = (
            self.client.table("food_log")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .eq("is_favorite", is_favorite)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        is_favorite: bool,
        payload: dict[str, object],
    ) -> FoodLogEntry | None:
        """Update a row owned by the user."""
        response = (
            self.client.table("food_log")
            .update(payload)
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .eq("is_favorite", is_favorite)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def delete_entry(self, user_id: UUID, entry_id: UUID, is_favorite: bool) -> bool:
        """Delete a row owned by the user."""
        response = (
            self.client.table("food_log")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .eq("is_favorite", is_favorite)
            .execute()
        )
        return bool(response.data)

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return regular entries in the time range, newest first."""
        response = (
            self.client.table("food_log")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_favorite", False)
            .gte("timestamp", start.isoformat())
            .lt("timestamp", end.isoformat())
            .order("timestamp", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def list_favorites(self, user_id: UUID) -> list[FoodLogEntry]:
        """Return favorites ordered by name."""
        response = (
            self.client.table("food_log")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_favorite", True)
            .order("name", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def list_history(self, user_id: UUID) -> list[FoodLogEntry]:
        """Return all regular entries, oldest first."""
        response = (
            self.client.table("food_log")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_favorite", False)
            .order("timestamp", desc=False)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> FoodLogEntry:
    timestamp_raw = row.get("timestamp")
    timestamp = (
        datetime.fromisoformat(timestamp_raw)
        if isinstance(timestamp_raw, str) and timestamp_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return FoodLogEntry(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        timestamp=timestamp,
        is_favorite=bool(row.get("is_favorite", False)),
    )
