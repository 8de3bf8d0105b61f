"""Meal description parsing backed by a text-generation model."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.meal_parsing import FoodItem
from calorie_tracker.services.extraction import extract_food_items
from calorie_tracker.services.parse_errors import (
    ConfigurationError,
    ExtractionError,
    InvalidInputError,
    NoFoodsFoundError,
    UpstreamError,
)

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a nutrition assistant. Your ONLY job is to identify EVERY food item mentioned and return nutrition data for each one.

RULE: If the user mentions multiple foods, you MUST create a separate entry for each one.

Example input: "half a cheeseburger and 15 french fries"
You MUST return:
[
  {"name": "half a cheeseburger", "estimated_calories": 250, "estimated_protein": 15, "assumed_weight_g": 100, "notes": "half of standard cheeseburger"},
  {"name": "15 french fries", "estimated_calories": 150, "estimated_protein": 2, "assumed_weight_g": 50, "notes": "15 medium french fries"}
]

DO NOT combine foods into one entry. DO NOT skip any foods mentioned.

Portion sizes may be vague ("a bowl", "some", "a handful"). Use your judgment to pick a reasonable weight in grams for each item, base the estimate on that weight, and explain the assumption in "notes".

The response must be valid JSON. Return your response as a JSON array. Each object in the array should contain exactly: name, estimated_calories, estimated_protein, assumed_weight_g, notes.

Respond ONLY with a valid JSON array, and nothing else. Do NOT use markdown or code blocks. Do NOT wrap your response in triple backticks or any other formatting. If no foods are identified, return an empty array: []"""  # noqa: E501

TraceHook = Callable[[str, dict[str, object]], None]


class CompletionError(Exception):
    """Raised by completion clients when the backend call fails."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class CompletionClient(Protocol):
    """Interface for a chat-style text-generation backend."""

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return the text of a single completion."""


def build_messages(utterance: str) -> list[dict[str, str]]:
    """Build the system instruction and user turn for an utterance."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": utterance},
    ]


@dataclass
class MealParserService:
    """Turns a free-text meal description into estimated food items."""

    client: CompletionClient | None
    model: str = "gpt-4o"
    temperature: float = 0.3
    max_tokens: int = 800
    debug: bool = False
    trace_hook: TraceHook | None = None

    async def parse(self, utterance: object) -> list[FoodItem]:
        """Parse an utterance, raising a MealParseError subclass on failure."""
        if not isinstance(utterance, str) or not utterance.strip():
            self._trace("outcome", {"result": InvalidInputError.reason})
            raise InvalidInputError()
        if self.client is None:
            self._trace("outcome", {"result": ConfigurationError.reason})
            raise ConfigurationError()

        messages = build_messages(utterance)
        self._trace("prompt_built", {"model": self.model, "utterance": utterance})
        try:
            reply = await self.client.complete(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except CompletionError as exc:
            self._trace(
                "outcome",
                {"result": UpstreamError.reason, "status_code": exc.status_code},
            )
            raise UpstreamError(exc.detail, upstream_status=exc.status_code) from exc
        if not reply or not reply.strip():
            self._trace("outcome", {"result": UpstreamError.reason})
            raise UpstreamError("OpenAI returned an empty response")
        self._trace("backend_responded", {"reply": reply})

        try:
            extraction = extract_food_items(reply)
        except ExtractionError:
            self._trace("outcome", {"result": ExtractionError.reason})
            raise
        self._trace(
            "extraction_strategy",
            {"strategy": extraction.strategy, "items": len(extraction.items)},
        )
        if not extraction.items:
            self._trace("outcome", {"result": NoFoodsFoundError.reason})
            raise NoFoodsFoundError()
        self._trace("outcome", {"result": "ok", "items": len(extraction.items)})
        return extraction.items

    def _trace(self, stage: str, data: dict[str, object]) -> None:
        if self.trace_hook is not None:
            self.trace_hook(stage, data)
        if self.debug:
            _logger.info("Meal parse %s: %s", stage, data)
