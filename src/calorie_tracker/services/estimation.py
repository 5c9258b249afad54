"""Free-text calorie estimation using LLMs."""

import asyncio
import json
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.entries import EntryType, EstimateItem, EstimateResult
from calorie_tracker.domain.errors import EstimationFailure
from calorie_tracker.domain.profile import Gender
from calorie_tracker.services.cache import Cache
from calorie_tracker.services.energy import KG_PER_POUND

DEFAULT_ENTRY_NAME = "Detailed Entry"
MACRO_FIELDS = ("pro", "fib", "sug", "fat")

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number"}

ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": ["meal", "exercise"]},
        "name": {"type": "string"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "string"},
                    "cals": _NUMBER,
                    "pro": _NUMBER,
                    "fib": _NUMBER,
                    "sug": _NUMBER,
                    "fat": _NUMBER,
                    "notes": {"type": "string"},
                },
                "required": [
                    "name",
                    "quantity",
                    "cals",
                    "pro",
                    "fib",
                    "sug",
                    "fat",
                    "notes",
                ],
                "additionalProperties": False,
            },
        },
        "cals": _NUMBER,
        "pro": _NUMBER,
        "fib": _NUMBER,
        "sug": _NUMBER,
        "fat": _NUMBER,
        "confidence": {"type": "string", "enum": ["low", "medium", "high"]},
    },
    "required": [
        "type",
        "name",
        "items",
        "cals",
        "pro",
        "fib",
        "sug",
        "fat",
        "confidence",
    ],
    "additionalProperties": False,
}

_PROMPT_TEMPLATE = """\
You are a nutritionist and exercise physiologist. You know USDA FoodData \
Central values, published restaurant nutrition (Chipotle, McDonald's, \
Starbucks and similar), packaged food labels and exercise MET values.

Estimate calories for the user's entry.

USER INPUT: "{text}"
{profile_lines}

1. Decide whether the entry is food/drink ("meal") or physical activity \
("exercise").
2. For meals, list every distinct item with a specific description, portion \
(infer it, or use one standard serving), brand or restaurant data when named, \
and preparation method. Give calories, protein, fiber, sugar and fat for each \
item and sum the totals.
   Portions: a bowl of rice is about 1.5 cups cooked (~300 kcal); a slice of \
14" pizza is 1/8 of the pie (250-350 kcal); a bite is 1/10 to 1/15 of the \
item; a handful of nuts is ~1 oz (160-180 kcal); restaurant portions are \
1.5-2x a standard serving.
   References: Big Mac 563 kcal; grande whole-milk latte 190 kcal; 6 oz \
grilled chicken breast 280 kcal; 1 cup cooked white rice 205 kcal; medium \
banana 105 kcal; 1 tbsp olive oil 119 kcal.
3. For exercise, estimate calories burned as MET x weight(kg) x hours.
   METs: walking 3 mph 3.5, brisk walking 4.3, running 5 mph 8.3, 6 mph 9.8, \
8 mph 11.8, cycling moderate 7.5, vigorous 10, swimming moderate 6, vigorous \
9.5, weight training 5-6, HIIT 8-10, yoga 3, pilates 3.5.
   Default durations: walking 30 min, running 30 min, gym 45 min.
   Set pro, fib, sug and fat to 0.
4. Name the entry with a clean summary including quantities, e.g. \
"2 slices Domino's pepperoni pizza" or "30 min run (moderate pace)".

Respond with JSON only:
{{"type": "meal" | "exercise", "name": string, "items": [{{"name": string, \
"quantity": string, "cals": number, "pro": number, "fib": number, \
"sug": number, "fat": number, "notes": string}}], "cals": number, \
"pro": number, "fib": number, "sug": number, "fat": number, \
"confidence": "low" | "medium" | "high"}}
Use real nutrition data. When unsure, give your best estimate with "low" \
confidence."""


class EstimationClient(Protocol):
    """Interface for LLM text completion returning JSON text."""

    async def complete(self, *, prompt: str, schema: dict[str, object]) -> str:
        """Return the raw model output for the prompt."""


@dataclass
class EstimationService:
    """Service that prompts the estimation model and validates its output."""

    client: EstimationClient
    cache: Cache
    cache_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def estimate(
        self,
        text: str,
        weight_lbs: float | None,
        height_inches: float | None = None,
        age: int | None = None,
        gender: Gender | None = None,
    ) -> EstimateResult:
        """Estimate calories and macros for a free-text entry."""
        normalized = normalize_text(text)
        if not normalized:
            raise EstimationFailure("Entry text is required", text=text)

        cache_key = estimate_cache_key(text, weight_lbs, height_inches, age, gender)
        cached = self.cache.get(cache_key)
        if isinstance(cached, EstimateResult):
            _logger.info("Estimate cache hit: text=%s", normalized)
            return cached

        prompt = build_prompt(text.strip(), weight_lbs, height_inches, age, gender)
        raw = await self._call_with_retry(
            lambda: self.client.complete(prompt=prompt, schema=ESTIMATE_SCHEMA),
            text=text,
        )
        result = parse_estimate(raw, text=text)
        self.cache.set(cache_key, result, ttl_seconds=self.cache_ttl_seconds)
        return result

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[str]], *, text: str
    ) -> str:
        """Call the client with a short retry, wrapping the final error."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Estimation call failed (attempt %s/%s): %s",
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise EstimationFailure(
                        f"Estimation service error: {exc}", text=text
                    ) from exc
                await asyncio.sleep(self.retry_delay_seconds)


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace for cache keys."""
    return " ".join(text.lower().split())


def estimate_cache_key(
    text: str,
    weight_lbs: float | None,
    height_inches: float | None,
    age: int | None,
    gender: Gender | None,
) -> tuple[object, ...]:
    """Build the content-addressed cache key for an estimate request."""
    return (
        "estimate",
        normalize_text(text),
        float(weight_lbs) if weight_lbs is not None else None,
        float(height_inches) if height_inches is not None else None,
        int(age) if age is not None else None,
        Gender(gender).value if gender is not None else None,
    )


def build_prompt(
    text: str,
    weight_lbs: float | None,
    height_inches: float | None = None,
    age: int | None = None,
    gender: Gender | None = None,
) -> str:
    """Render the estimation prompt for a user entry."""
    lines = []
    if weight_lbs:
        lines.append(
            f"USER WEIGHT: {weight_lbs:g} lbs ({weight_lbs * KG_PER_POUND:.1f} kg)"
        )
    else:
        lines.append("USER WEIGHT: unknown (assume 70 kg)")
    if height_inches:
        lines.append(f"USER HEIGHT: {height_inches:g} in")
    if age:
        lines.append(f"USER AGE: {age}")
    if gender:
        lines.append(f"USER GENDER: {Gender(gender).value}")
    return _PROMPT_TEMPLATE.format(text=text, profile_lines="\n".join(lines))


def parse_estimate(raw: str, text: str | None = None) -> EstimateResult:
    """Parse model output into a validated estimate.

    Calories must be a finite, non-negative number. Macros fall back to 0 and
    are always 0 for exercise.
    """
    payload = _extract_json(raw, text)
    cals = _parse_calories(payload.get("cals"), text)
    entry_type = (
        EntryType.EXERCISE
        if str(payload.get("type", "")).strip().lower() == EntryType.EXERCISE.value
        else EntryType.MEAL
    )
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip() or name.strip() == "string":
        name = DEFAULT_ENTRY_NAME
    macros = {key: _macro(payload.get(key)) for key in MACRO_FIELDS}
    if entry_type == EntryType.EXERCISE:
        macros = dict.fromkeys(MACRO_FIELDS, 0.0)
    confidence = payload.get("confidence")
    return EstimateResult(
        type=entry_type,
        name=name.strip(),
        cals=cals,
        confidence=confidence if isinstance(confidence, str) else None,
        items=_parse_items(payload.get("items")),
        **macros,
    )


def _extract_json(raw: str, text: str | None) -> dict[str, object]:
    start = raw.find("{") if raw else -1
    end = raw.rfind("}") if raw else -1
    if start == -1 or end < start:
        raise EstimationFailure("Estimation returned no JSON object", text=text)
    try:
        payload = json.loads(raw[start : end + 1])
    except json.JSONDecodeError as exc:
        raise EstimationFailure("Estimation returned invalid JSON", text=text) from exc
    if not isinstance(payload, dict):
        raise EstimationFailure("Estimation returned no JSON object", text=text)
    return payload


def _parse_calories(value: object, text: str | None) -> float:
    number = _to_number(value)
    if number is None:
        raise EstimationFailure("Estimation returned no calorie value", text=text)
    if number < 0:
        raise EstimationFailure("Estimation returned negative calories", text=text)
    return number


def _macro(value: object) -> float:
    number = _to_number(value)
    if number is None or number < 0:
        return 0.0
    return number


def _to_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_items(value: object) -> list[EstimateItem]:
    if not isinstance(value, list):
        return []
    items = []
    for raw_item in value:
        if not isinstance(raw_item, dict) or not raw_item.get("name"):
            continue
        quantity = raw_item.get("quantity")
        notes = raw_item.get("notes")
        items.append(
            EstimateItem(
                name=str(raw_item["name"]),
                quantity=str(quantity) if quantity is not None else None,
                cals=_macro(raw_item.get("cals")),
                notes=str(notes) if notes is not None else None,
            )
        )
    return items
