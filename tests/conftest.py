"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.food_log import FoodLogEntry, Goals
from calorie_tracker.services.food_log import FoodLogRepository, FoodLogService
from calorie_tracker.services.goals import GoalsRepository, GoalsService
from calorie_tracker.services.meal_parser import (
    CompletionClient,
    CompletionError,
    MealParserService,
)

TWO_ITEM_REPLY = (
    '[{"name":"half a cheeseburger","estimated_calories":250,'
    '"estimated_protein":15,"assumed_weight_g":100,'
    '"notes":"half of standard cheeseburger"},'
    '{"name":"15 french fries","estimated_calories":150,"estimated_protein":2,'
    '"assumed_weight_g":50,"notes":"15 medium french fries"}]'
)

FAKE_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client returning a fixed reply or raising an error."""

    reply: str = TWO_ITEM_REPLY
    error: CompletionError | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    rows: dict[UUID, FoodLogEntry] = field(default_factory=dict)

    def create_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        calories: float,
        protein: float,
        timestamp: datetime,
        is_favorite: bool,
    ) -> FoodLogEntry:
        entry = FoodLogEntry(
            id=uuid4(),
            user_id=user_id,
            name=name,
            calories=calories,
            protein=protein,
            timestamp=timestamp,
            is_favorite=is_favorite,
        )
        self.rows[entry.id] = entry
        return entry

    def get_entry(
        self, user_id: UUID, entry_id: UUID, is_favorite: bool
    ) -> FoodLogEntry | None:
        entry = self.rows.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        if entry.is_favorite != is_favorite:
            return None
        return entry

    def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        is_favorite: bool,
        payload: dict[str, object],
    ) -> FoodLogEntry | None:
        current = self.get_entry(user_id, entry_id, is_favorite)
        if current is None:
            return None
        updated = FoodLogEntry(
            id=current.id,
            user_id=current.user_id,
            name=str(payload.get("name", current.name)),
            calories=float(payload.get("calories", current.calories)),
            protein=float(payload.get("protein", current.protein)),
            timestamp=current.timestamp,
            is_favorite=current.is_favorite,
        )
        self.rows[entry_id] = updated
        return updated

    def delete_entry(self, user_id: UUID, entry_id: UUID, is_favorite: bool) -> bool:
        if self.get_entry(user_id, entry_id, is_favorite) is None:
            return False
        del self.rows[entry_id]
        return True

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        entries = [
            entry
            for entry in self.rows.values()
            if entry.user_id == user_id
            and not entry.is_favorite
            and start <= entry.timestamp < end
        ]
        return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)

    def list_favorites(self, user_id: UUID) -> list[FoodLogEntry]:
        favorites = [
            entry
            for entry in self.rows.values()
            if entry.user_id == user_id and entry.is_favorite
        ]
        return sorted(favorites, key=lambda entry: entry.name)

    def list_history(self, user_id: UUID) -> list[FoodLogEntry]:
        entries = [
            entry
            for entry in self.rows.values()
            if entry.user_id == user_id and not entry.is_favorite
        ]
        return sorted(entries, key=lambda entry: entry.timestamp)


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, Goals] = field(default_factory=dict)
    fail_writes: bool = False
    writes: int = 0

    def get_goals(self, user_id: UUID) -> Goals | None:
        return self.goals.get(user_id)

    def upsert_goals(
        self, user_id: UUID, daily_calories_goal: float, daily_protein_goal: float
    ) -> Goals:
        self.writes += 1
        if self.fail_writes:
            raise RuntimeError("Failed to save goals")
        existing = self.goals.get(user_id)
        goals = Goals(
            id=existing.id if existing else uuid4(),
            user_id=user_id,
            daily_calories_goal=daily_calories_goal,
            daily_protein_goal=daily_protein_goal,
        )
        self.goals[user_id] = goals
        return goals


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
        openai_api_key="openai-key",
        environment="local",
    )


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def goals_repository() -> InMemoryGoalsRepository:
    return InMemoryGoalsRepository()


@pytest.fixture
def container(
    settings: Settings,
    completion_client: FakeCompletionClient,
    food_log_repository: InMemoryFoodLogRepository,
    goals_repository: InMemoryGoalsRepository,
) -> AppContainer:
    goals_service = GoalsService(goals_repository)
    food_log_service = FoodLogService(
        repository=food_log_repository,
        goals_service=goals_service,
    )
    meal_parser_service = MealParserService(
        client=completion_client,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        max_tokens=settings.openai_max_tokens,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_parser_service=meal_parser_service,
        food_log_service=food_log_service,
        goals_service=goals_service,
        close_resources=close_resources,
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()
