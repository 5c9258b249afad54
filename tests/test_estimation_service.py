"""Tests for the estimation service."""

import asyncio
import json

import pytest

from calorie_tracker.domain.entries import EntryType
from calorie_tracker.domain.errors import EstimationFailure
from calorie_tracker.domain.profile import Gender
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.estimation import (
    DEFAULT_ENTRY_NAME,
    EstimationService,
    build_prompt,
    estimate_cache_key,
    parse_estimate,
)
from tests.conftest import MEAL_PAYLOAD, FakeEstimationClient


def test_parse_estimate_extracts_json_from_surrounding_text() -> None:
    raw = "Here you go:\n```json\n" + json.dumps(MEAL_PAYLOAD) + "\n```"

    result = parse_estimate(raw)

    assert result.type == EntryType.MEAL
    assert result.name == "2 slices Domino's pepperoni pizza"
    assert result.cals == 600
    assert (result.pro, result.fib, result.sug, result.fat) == (24, 3, 6, 26)
    assert result.confidence == "high"
    assert result.items[0].quantity == "2 slices"


def test_parse_estimate_zeroes_macros_for_exercise() -> None:
    raw = json.dumps(
        {"type": "exercise", "name": "5 mile run", "cals": 520, "pro": 12, "fat": 3}
    )

    result = parse_estimate(raw)

    assert result.type == EntryType.EXERCISE
    assert (result.pro, result.fib, result.sug, result.fat) == (0, 0, 0, 0)


def test_parse_estimate_defaults_missing_fields() -> None:
    raw = json.dumps({"cals": "350", "name": "string", "pro": -4, "fib": "lots"})

    result = parse_estimate(raw)

    assert result.type == EntryType.MEAL
    assert result.name == DEFAULT_ENTRY_NAME
    assert result.cals == 350
    assert result.pro == 0
    assert result.fib == 0
    assert result.items == []


@pytest.mark.parametrize(
    "raw",
    [
        json.dumps({"name": "apple", "cals": -95}),
        json.dumps({"name": "apple", "cals": "ninety"}),
        json.dumps({"name": "apple"}),
        '{"name": "apple", "cals": NaN}',
        "I could not estimate that.",
        "{not json}",
    ],
)
def test_parse_estimate_rejects_bad_calories(raw: str) -> None:
    with pytest.raises(EstimationFailure) as excinfo:
        parse_estimate(raw, text="apple")

    assert excinfo.value.status_code == 502
    assert excinfo.value.details["text"] == "apple"


def test_build_prompt_includes_profile() -> None:
    prompt = build_prompt("ran 5 miles", 180, 70, 30, Gender.MALE)

    assert "ran 5 miles" in prompt
    assert "USER WEIGHT: 180 lbs (81.6 kg)" in prompt
    assert "USER GENDER: male" in prompt


def test_build_prompt_without_weight() -> None:
    prompt = build_prompt("ran 5 miles", None)

    assert "USER WEIGHT: unknown" in prompt


def test_cache_key_normalizes_text() -> None:
    assert estimate_cache_key(
        "  Two   Eggs ", 180, None, None, None
    ) == estimate_cache_key("two eggs", 180.0, None, None, None)
    assert estimate_cache_key("two eggs", 180, None, None, None) != (
        estimate_cache_key("two eggs", 200, None, None, None)
    )


def test_estimate_uses_cache(
    estimation_service: EstimationService, estimation_client: FakeEstimationClient
) -> None:
    first = asyncio.run(estimation_service.estimate("2 slices pizza", 180))
    second = asyncio.run(estimation_service.estimate("  2 Slices PIZZA", 180))

    assert first == second
    assert len(estimation_client.prompts) == 1


def test_estimate_calls_again_for_different_weight(
    estimation_service: EstimationService, estimation_client: FakeEstimationClient
) -> None:
    asyncio.run(estimation_service.estimate("ran 5 miles", 180))
    asyncio.run(estimation_service.estimate("ran 5 miles", 150))

    assert len(estimation_client.prompts) == 2


def test_estimate_wraps_client_errors_after_retry() -> None:
    client = FakeEstimationClient(error=RuntimeError("quota exceeded"))
    service = EstimationService(
        client=client, cache=InMemoryCache(), retry_delay_seconds=0
    )

    with pytest.raises(EstimationFailure) as excinfo:
        asyncio.run(service.estimate("a bagel", 180))

    assert "quota exceeded" in excinfo.value.message
    assert len(client.prompts) == 2


def test_estimate_does_not_cache_failures() -> None:
    client = FakeEstimationClient(payload='{"name": "bagel"}')
    cache = InMemoryCache()
    service = EstimationService(client=client, cache=cache, retry_delay_seconds=0)

    with pytest.raises(EstimationFailure):
        asyncio.run(service.estimate("a bagel", 180))

    assert len(cache) == 0


def test_estimate_rejects_blank_text(
    estimation_service: EstimationService, estimation_client: FakeEstimationClient
) -> None:
    with pytest.raises(EstimationFailure):
        asyncio.run(estimation_service.estimate("   ", 180))

    assert estimation_client.prompts == []
