"""Food log, favorites and daily summary services."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.food_log import (
    DailySummary,
    FoodFrequency,
    FoodLogEntry,
)
from calorie_tracker.domain.meal_parsing import FoodItem
from calorie_tracker.services.goals import GoalsService


class FoodLogError(Exception):
    """Base class for food log failures."""


class EntryNotFoundError(FoodLogError):
    """No entry with that id belongs to the user."""


class InvalidEntryError(FoodLogError):
    """Entry values are missing or out of range."""


class FoodLogRepository(Protocol):
    """Persistence interface for the food_log table."""

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        calories: float,
        protein: float,
        timestamp: datetime,
        is_favorite: bool,
    ) -> FoodLogEntry:
        """Insert a row and return it."""

    def get_entry(
        self, user_id: UUID, entry_id: UUID, is_favorite: bool
    ) -> FoodLogEntry | None:
        """Return a user's row by id, if present."""

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        is_favorite: bool,
        payload: dict[str, object],
    ) -> FoodLogEntry | None:
        """Update a user's row and return it, or None when it doesn't exist."""

    def delete_entry(self, user_id: UUID, entry_id: UUID, is_favorite: bool) -> bool:
        """Delete a user's row, returning False when nothing matched."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return regular entries in [start, end), newest first."""

    def list_favorites(self, user_id: UUID) -> list[FoodLogEntry]:
        """Return favorites ordered by name."""

    def list_history(self, user_id: UUID) -> list[FoodLogEntry]:
        """Return every regular entry for a user."""


@dataclass
class FoodLogService:
    """Application service for logged foods and favorites."""

    repository: FoodLogRepository
    goals_service: GoalsService

    def add_entry(
        self, user_id: UUID, name: str, calories: float, protein: float
    ) -> FoodLogEntry:
        """Log a food eaten now."""
        return self._create(user_id, name, calories, protein, is_favorite=False)

    def add_items(self, user_id: UUID, items: list[FoodItem]) -> list[FoodLogEntry]:
        """Log parsed food items as separate entries, keeping their order."""
        return [
            self.add_entry(
                user_id,
                item.name,
                round(item.estimated_calories),
                round(item.estimated_protein),
            )
            for item in items
        ]

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        name: str,
        calories: float,
        protein: float,
    ) -> FoodLogEntry:
        """Replace the name and macros of a logged entry."""
        return self._update(user_id, entry_id, name, calories, protein, False)

    def remove_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a logged entry."""
        if not self.repository.delete_entry(user_id, entry_id, is_favorite=False):
            raise EntryNotFoundError(str(entry_id))

    def list_today(self, user_id: UUID, timezone_name: str) -> list[FoodLogEntry]:
        """Return today's entries in the user's timezone, newest first."""
        start, end = _day_bounds(timezone_name)
        return self.repository.list_entries(user_id, start, end)

    def add_favorite(
        self, user_id: UUID, name: str, calories: float, protein: float
    ) -> FoodLogEntry:
        """Save a reusable favorite food."""
        return self._create(user_id, name, calories, protein, is_favorite=True)

    def update_favorite(
        self,
        user_id: UUID,
        favorite_id: UUID,
        name: str,
        calories: float,
        protein: float,
    ) -> FoodLogEntry:
        """Replace the name and macros of a favorite."""
        return self._update(user_id, favorite_id, name, calories, protein, True)

    def remove_favorite(self, user_id: UUID, favorite_id: UUID) -> None:
        """Delete a favorite."""
        if not self.repository.delete_entry(user_id, favorite_id, is_favorite=True):
            raise EntryNotFoundError(str(favorite_id))

    def list_favorites(self, user_id: UUID) -> list[FoodLogEntry]:
        """Return favorites ordered by name."""
        return self.repository.list_favorites(user_id)

    def log_favorite(self, user_id: UUID, favorite_id: UUID) -> FoodLogEntry:
        """Log a new entry copied from a favorite."""
        favorite = self.repository.get_entry(user_id, favorite_id, is_favorite=True)
        if favorite is None:
            raise EntryNotFoundError(str(favorite_id))
        return self.add_entry(
            user_id, favorite.name, favorite.calories, favorite.protein
        )

    def top_frequent_foods(
        self, user_id: UUID, limit: int = 10
    ) -> list[FoodFrequency]:
        """Rank historical entries by how often each food name was logged."""
        counts: dict[str, FoodFrequency] = {}
        for entry in self.repository.list_history(user_id):
            key = entry.name.lower()
            current = counts.get(key)
            if current is None:
                counts[key] = FoodFrequency(
                    name=entry.name,
                    count=1,
                    calories=entry.calories,
                    protein=entry.protein,
                )
                continue
            counts[key] = FoodFrequency(
                name=current.name,
                count=current.count + 1,
                calories=current.calories + entry.calories,
                protein=current.protein + entry.protein,
            )
        ranked = sorted(counts.values(), key=lambda item: item.count, reverse=True)
        return ranked[:limit]

    def daily_summary(self, user_id: UUID, timezone_name: str) -> DailySummary:
        """Return today's totals against the user's goals."""
        entries = self.list_today(user_id, timezone_name)
        goals = self.goals_service.get_goals(user_id)
        total_calories = sum(entry.calories for entry in entries)
        total_protein = sum(entry.protein for entry in entries)
        return DailySummary(
            entries=entries,
            goals=goals,
            total_calories=total_calories,
            total_protein=total_protein,
            calories_remaining=max(0.0, goals.daily_calories_goal - total_calories),
            protein_remaining=max(0.0, goals.daily_protein_goal - total_protein),
            calorie_progress=_progress(total_calories, goals.daily_calories_goal),
            protein_progress=_progress(total_protein, goals.daily_protein_goal),
        )

    def _create(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        calories: float,
        protein: float,
        *,
        is_favorite: bool,
    ) -> FoodLogEntry:
        cleaned = _validate(name, calories, protein)
        return self.repository.create_entry(
            user_id=user_id,
            name=cleaned,
            calories=calories,
            protein=protein,
            timestamp=datetime.now(tz=UTC),
            is_favorite=is_favorite,
        )

    def _update(  # noqa: PLR0913
        self,
        user_id: UUID,
        entry_id: UUID,
        name: str,
        calories: float,
        protein: float,
        is_favorite: bool,
    ) -> FoodLogEntry:
        cleaned = _validate(name, calories, protein)
        updated = self.repository.update_entry(
            user_id,
            entry_id,
            is_favorite,
            {"name": cleaned, "calories": calories, "protein": protein},
        )
        if updated is None:
            raise EntryNotFoundError(str(entry_id))
        return updated


def _validate(name: str, calories: float, protein: float) -> str:
    """Return the stripped name, rejecting blank names and negative macros."""
    cleaned = name.strip()
    if not cleaned:
        raise InvalidEntryError("Food name is required")
    if calories < 0 or protein < 0:
        raise InvalidEntryError("Calories and protein must be non-negative")
    return cleaned


def _day_bounds(timezone_name: str) -> tuple[datetime, datetime]:
    """Return today's start and end in UTC for a timezone."""
    tz = ZoneInfo(timezone_name)
    start = datetime.now(tz=tz).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.astimezone(UTC), end.astimezone(UTC)


def _progress(total: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(100.0, total / goal * 100)
