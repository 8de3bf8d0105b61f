"""Tolerant extraction of food items from free-text model replies.

The model is asked for a bare JSON array but does not always comply, so the
reply is tried with increasingly permissive strategies: the whole text, the
first fenced code block, then the span from the first ``[`` to the last ``]``.
Whatever parses first is normalized into a list of :class:`FoodItem`.
"""

import json
import math
import re
from collections.abc import Callable

from calorie_tracker.domain.meal_parsing import Extraction, FoodItem
from calorie_tracker.services.parse_errors import ExtractionError

STRATEGY_DIRECT = "direct"
STRATEGY_FENCED_BLOCK = "fenced_block"
STRATEGY_BRACKET_SCAN = "bracket_scan"

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_LIST_KEYS = ("food_items", "foods", "items")
_NUMERIC_FIELDS = ("estimated_calories", "estimated_protein", "assumed_weight_g")
_NOT_PARSED = object()


def extract_food_items(reply: str) -> Extraction:
    """Recover food items from a model reply or raise ExtractionError."""
    content = reply.strip()
    strategies: list[tuple[str, Callable[[str], object]]] = [
        (STRATEGY_DIRECT, _parse_direct),
        (STRATEGY_FENCED_BLOCK, _parse_fenced_block),
        (STRATEGY_BRACKET_SCAN, _parse_bracket_span),
    ]
    for name, strategy in strategies:
        parsed = strategy(content)
        if parsed is not _NOT_PARSED:
            return Extraction(items=normalize_food_items(parsed), strategy=name)
    raise ExtractionError(_preview(content))


def normalize_food_items(parsed: object) -> list[FoodItem]:
    """Coerce any parsed JSON value into a list of food items."""
    return [
        item
        for item in (_coerce_item(element) for element in _candidate_list(parsed))
        if item is not None
    ]


def _parse_direct(content: str) -> object:
    return _loads(content)


def _parse_fenced_block(content: str) -> object:
    match = _FENCED_BLOCK.search(content)
    if not match:
        return _NOT_PARSED
    return _loads(match.group(1).strip())


def _parse_bracket_span(content: str) -> object:
    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end <= start:
        return _NOT_PARSED
    return _loads(content[start : end + 1])


def _loads(text: str) -> object:
    try:
        return json.loads(text)
    except ValueError:
        return _NOT_PARSED


def _candidate_list(parsed: object) -> list[object]:
    """Pick the list of food-shaped values out of a parsed reply."""
    if isinstance(parsed, list):
        return parsed
    if not isinstance(parsed, dict):
        return []
    for key in _LIST_KEYS:
        value = parsed.get(key)
        if isinstance(value, list):
            return value
    for value in parsed.values():
        if value and isinstance(value, list) and all(
            isinstance(element, dict) and "name" in element for element in value
        ):
            return value
    if "name" in parsed and "estimated_calories" in parsed:
        return [parsed]
    return []


def _coerce_item(element: object) -> FoodItem | None:
    """Build a FoodItem from one element, or None when it has no name."""
    if not isinstance(element, dict):
        return None
    name = element.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    numbers = {field: _coerce_number(element.get(field)) for field in _NUMERIC_FIELDS}
    notes = element.get("notes")
    return FoodItem(
        name=name.strip(),
        notes=notes if isinstance(notes, str) else "",
        **numbers,
    )


def _coerce_number(value: object) -> int | float:
    """Return a finite non-negative number, defaulting to 0.

    Whole numbers stay ints so they serialize the way the reply sent them.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if not isinstance(value, int | float):
        return 0
    try:
        number = float(value)
    except OverflowError:
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return value


def _preview(content: str, limit: int = 200) -> str:
    if len(content) <= limit:
        return content
    return f"{content[:limit]}..."
