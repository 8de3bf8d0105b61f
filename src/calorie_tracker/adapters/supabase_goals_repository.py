"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.food_log import Goals
from calorie_tracker.services.goals import GoalsRepository

_COLUMNS = "id, user_id, daily_calories_goal, daily_protein_goal, updated_at"


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for the one-row-per-user goals table."""

    client: Client

    def get_goals(self, user_id: UUID) -> Goals | None:
        """Return the goals row for a user."""
        response = (
            self.client.table("goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_goals(response.data[0])

    def upsert_goals(
        self, user_id: UUID, daily_calories_goal: float, daily_protein_goal: float
    ) -> Goals:
        """Insert or replace the goals row keyed by user_id."""
        response = (
            self.client.table("goals")
            .upsert(
                {
                    "user_id": str(user_id),
                    "daily_calories_goal": daily_calories_goal,
                    "daily_protein_goal": daily_protein_goal,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save goals")
        return _parse_goals(response.data[0])


def _parse_goals(row: dict[str, object]) -> Goals:
    updated_raw = row.get("updated_at")
    return Goals(
        id=UUID(row["id"]) if row.get("id") else None,
        user_id=UUID(row["user_id"]),
        daily_calories_goal=float(row.get("daily_calories_goal", 0.0)),
        daily_protein_goal=float(row.get("daily_protein_goal", 0.0)),
        updated_at=datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None,
    )
