"""Daily calorie and protein goals."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.food_log import Goals

_logger = logging.getLogger(__name__)


class InvalidGoalsError(ValueError):
    """Goal values must be positive."""


class GoalsRepository(Protocol):
    """Persistence interface for the goals table."""

    def get_goals(self, user_id: UUID) -> Goals | None:
        """Return the user's goals row, if present."""

    def upsert_goals(
        self, user_id: UUID, daily_calories_goal: float, daily_protein_goal: float
    ) -> Goals:
        """Insert or replace the user's goals row and return it."""


@dataclass
class GoalsService:
    """Service for reading and updating goals."""

    repository: GoalsRepository
    default_calories_goal: float = 1800
    default_protein_goal: float = 75

    def get_goals(self, user_id: UUID) -> Goals:
        """Return stored goals, creating the defaults for new users."""
        existing = self.repository.get_goals(user_id)
        if existing is not None:
            return existing
        try:
            return self.repository.upsert_goals(
                user_id, self.default_calories_goal, self.default_protein_goal
            )
        except Exception:
            _logger.exception(
                "Failed to create default goals", extra={"user_id": str(user_id)}
            )
            return Goals(
                user_id=user_id,
                daily_calories_goal=self.default_calories_goal,
                daily_protein_goal=self.default_protein_goal,
            )

    def update_goals(
        self, user_id: UUID, daily_calories_goal: float, daily_protein_goal: float
    ) -> Goals:
        """Replace the user's goals."""
        if daily_calories_goal <= 0 or daily_protein_goal <= 0:
            raise InvalidGoalsError("Goals must be positive numbers")
        return self.repository.upsert_goals(
            user_id, daily_calories_goal, daily_protein_goal
        )
