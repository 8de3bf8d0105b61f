"""Tests for tolerant extraction of model replies."""

import json

import pytest

from calorie_tracker.services.extraction import (
    STRATEGY_BRACKET_SCAN,
    STRATEGY_DIRECT,
    STRATEGY_FENCED_BLOCK,
    extract_food_items,
    normalize_food_items,
)
from calorie_tracker.services.parse_errors import ExtractionError
from tests.conftest import TWO_ITEM_REPLY


def test_bare_array_is_returned_unchanged() -> None:
    result = extract_food_items(TWO_ITEM_REPLY)

    assert result.strategy == STRATEGY_DIRECT
    assert [item.model_dump() for item in result.items] == json.loads(TWO_ITEM_REPLY)


def test_fenced_block_matches_unwrapped_result() -> None:
    reply = f"```json\n{TWO_ITEM_REPLY}\n```"

    result = extract_food_items(reply)

    assert result.strategy == STRATEGY_FENCED_BLOCK
    assert result.items == extract_food_items(TWO_ITEM_REPLY).items


def test_untagged_fence_inside_prose() -> None:
    reply = f"Sure! Here is the breakdown:\n```\n{TWO_ITEM_REPLY}\n```\nEnjoy."

    result = extract_food_items(reply)

    assert result.strategy == STRATEGY_FENCED_BLOCK
    assert [item.name for item in result.items] == [
        "half a cheeseburger",
        "15 french fries",
    ]


def test_array_embedded_in_prose_is_recovered() -> None:
    reply = f"Based on your meal, my estimate is {TWO_ITEM_REPLY} -- hope it helps."

    result = extract_food_items(reply)

    assert result.strategy == STRATEGY_BRACKET_SCAN
    assert len(result.items) == 2


def test_broken_fence_falls_back_to_bracket_scan() -> None:
    reply = (
        "```\nnot json at all\n```\n"
        '[{"name": "apple", "estimated_calories": 95, "estimated_protein": 0.5,'
        ' "assumed_weight_g": 180, "notes": "medium apple"}]'
    )

    result = extract_food_items(reply)

    assert result.strategy == STRATEGY_BRACKET_SCAN
    assert result.items[0].name == "apple"


def test_food_items_object_returns_inner_array() -> None:
    reply = json.dumps({"food_items": json.loads(TWO_ITEM_REPLY)})

    result = extract_food_items(reply)

    assert [item.name for item in result.items] == [
        "half a cheeseburger",
        "15 french fries",
    ]


def test_object_with_other_list_of_foods() -> None:
    reply = json.dumps({"meal": [{"name": "toast", "estimated_calories": 80}]})

    result = extract_food_items(reply)

    assert [item.name for item in result.items] == ["toast"]


def test_single_food_object_is_wrapped() -> None:
    result = extract_food_items('{"name": "banana", "estimated_calories": 105}')

    assert len(result.items) == 1
    item = result.items[0]
    assert item.name == "banana"
    assert item.estimated_calories == 105
    assert item.estimated_protein == 0
    assert item.assumed_weight_g == 0
    assert item.notes == ""


@pytest.mark.parametrize("reply", ["[]", '{"message": "no food here"}', '"hello"'])
def test_unrecognized_shapes_yield_no_items(reply: str) -> None:
    result = extract_food_items(reply)

    assert result.items == []
    assert result.strategy == STRATEGY_DIRECT


@pytest.mark.parametrize(
    "reply", ["I cannot help with that.", "[not json]", "```json\n{oops\n```"]
)
def test_unparseable_reply_raises(reply: str) -> None:
    with pytest.raises(ExtractionError) as exc_info:
        extract_food_items(reply)

    assert exc_info.value.reason == "extraction_failed"


def test_numeric_fields_are_coerced() -> None:
    items = normalize_food_items(
        [
            {
                "name": "  rice  ",
                "estimated_calories": "200",
                "estimated_protein": -3,
                "assumed_weight_g": "about a cup",
                "notes": None,
            },
            {"name": "egg", "estimated_calories": True, "estimated_protein": 6.3},
        ]
    )

    assert items[0].name == "rice"
    assert items[0].estimated_calories == 200
    assert items[0].estimated_protein == 0
    assert items[0].assumed_weight_g == 0
    assert items[0].notes == ""
    assert items[1].estimated_calories == 0
    assert items[1].estimated_protein == 6.3


def test_oversized_integer_is_coerced_to_zero() -> None:
    reply = '[{"name": "rice", "estimated_calories": 1' + "0" * 400 + "}]"

    result = extract_food_items(reply)

    assert result.strategy == STRATEGY_DIRECT
    assert result.items[0].name == "rice"
    assert result.items[0].estimated_calories == 0


def test_whole_numbers_stay_integers() -> None:
    result = extract_food_items(TWO_ITEM_REPLY)

    dumped = [item.model_dump() for item in result.items]
    assert json.dumps(dumped) == json.dumps(json.loads(TWO_ITEM_REPLY))
    assert type(dumped[0]["estimated_calories"]) is int
    assert type(dumped[0]["assumed_weight_g"]) is int


def test_elements_without_name_are_dropped() -> None:
    items = normalize_food_items(
        [
            {"estimated_calories": 100},
            {"name": "", "estimated_calories": 50},
            "just a string",
            {"name": "pear", "estimated_calories": 100},
        ]
    )

    assert [item.name for item in items] == ["pear"]
