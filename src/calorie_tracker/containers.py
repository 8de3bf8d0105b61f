"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.openai_completion_client import OpenAICompletionClient
from calorie_tracker.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from calorie_tracker.adapters.supabase_goals_repository import SupabaseGoalsRepository
from calorie_tracker.config import Settings, resolve_api_key
from calorie_tracker.services.food_log import FoodLogService
from calorie_tracker.services.goals import GoalsService
from calorie_tracker.services.meal_parser import MealParserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_parser_service: MealParserService
    food_log_service: FoodLogService
    goals_service: GoalsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    goals_service = GoalsService(
        SupabaseGoalsRepository(supabase_client),
        default_calories_goal=resolved_settings.default_daily_calories_goal,
        default_protein_goal=resolved_settings.default_daily_protein_goal,
    )
    food_log_service = FoodLogService(
        repository=SupabaseFoodLogRepository(supabase_client),
        goals_service=goals_service,
    )

    api_key = resolve_api_key(resolved_settings.openai_api_key)
    completion_client = OpenAICompletionClient.create(api_key) if api_key else None
    meal_parser_service = MealParserService(
        client=completion_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        max_tokens=resolved_settings.openai_max_tokens,
        debug=resolved_settings.parse_debug,
    )

    async def close_resources() -> None:
        if completion_client is not None:
            await completion_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_parser_service=meal_parser_service,
        food_log_service=food_log_service,
        goals_service=goals_service,
        close_resources=close_resources,
    )
