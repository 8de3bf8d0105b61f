"""Request models for the HTTP API."""

from pydantic import BaseModel, Field

from calorie_tracker.domain.meal_parsing import FoodItem


class EntryRequest(BaseModel):
    """Food log entry or favorite as submitted by the client."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)


class FoodItemsRequest(BaseModel):
    """Parsed food items to log in one request."""

    items: list[FoodItem] = Field(min_length=1)


class GoalsRequest(BaseModel):
    """New daily targets."""

    daily_calories_goal: float = Field(gt=0)
    daily_protein_goal: float = Field(gt=0)
