"""Models for meal description parsing results."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


class FoodItem(BaseModel):
    """Single food estimated from a meal description."""

    name: str = Field(min_length=1)
    estimated_calories: int | float = Field(ge=0)
    estimated_protein: int | float = Field(ge=0)
    assumed_weight_g: int | float = Field(ge=0)
    notes: str = ""


@dataclass(frozen=True)
class Extraction:
    """Food items recovered from a model reply and the strategy that worked."""

    items: list[FoodItem]
    strategy: str
