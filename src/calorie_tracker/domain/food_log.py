"""Domain models for the food log, favorites and goals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodLogEntry:
    """Row of the food log; favorites share the table with is_favorite set."""

    id: UUID
    user_id: UUID
    name: str
    calories: float
    protein: float
    timestamp: datetime
    is_favorite: bool = False


@dataclass(frozen=True)
class Goals:
    """Daily calorie and protein targets for a user."""

    user_id: UUID
    daily_calories_goal: float
    daily_protein_goal: float
    id: UUID | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class FoodFrequency:
    """How often a food was logged, with summed macros."""

    name: str
    count: int
    calories: float
    protein: float


@dataclass(frozen=True)
class DailySummary:
    """Today's entries measured against the user's goals."""

    entries: list[FoodLogEntry]
    goals: Goals
    total_calories: float
    total_protein: float
    calories_remaining: float
    protein_remaining: float
    calorie_progress: float
    protein_progress: float
