"""Estimate Parser — turns free-form model output into a validated StructuredEstimate.

Invariants:
    - Three gates run in order, first failure wins:
      structure (MalformedResponseError) → completeness/type (IncompleteFieldsError)
      → range (RangeViolationError)
    - Every value accepted satisfies 0 <= value <= MAX_COST and is finite
    - Oversized literals never escape as OverflowError/ValueError: past the integer
      digit limit → MalformedResponseError, beyond float range → RangeViolationError
    - Advisory checks (suspiciously low, unexpected zero, lodging vs flight) never raise;
      they are logged and attached to the estimate as warnings
    - No module state: parsing the same text twice yields equal estimates

Design Decisions:
    - json.JSONDecoder.raw_decode scanned from each '{': finds the first balanced
      object even when the model wraps it in prose or ``` fences
    - bool rejected as a number even though it subclasses int: `true` is never a price
    - Numeric strings ("450") rejected: the prompt demands JSON numbers, and accepting
      strings would silently coerce whatever the model invents
"""

import json
import logging
import math

from piggybank.core.domain_types import CostField
from piggybank.core.errors import (
    ErrorContext,
    IncompleteFieldsError,
    MalformedResponseError,
    RangeViolationError,
)
from piggybank.core.travel_plan import Necessity, StructuredEstimate

logger = logging.getLogger(__name__)

MIN_COST = 0.0
MAX_COST = 100_000.0
SUSPICIOUSLY_LOW = 1.0
LODGING_TO_FLIGHT_RATIO = 5.0
EXCERPT_CHARS = 200

REQUIRED_FIELDS: tuple[CostField, ...] = (
    CostField.FLIGHT,
    CostField.ROOMS_PER_NIGHT,
    CostField.FOOD_DAILY,
)


def extract_json_object(
    raw_text: str, context: ErrorContext | None = None,
) -> dict:
    """Gate 1: return the first JSON object embedded in the text."""
    decoder = json.JSONDecoder()
    idx = raw_text.find("{")
    while idx != -1:
        try:
            parsed, _ = decoder.raw_decode(raw_text[idx:])
        except ValueError:
            # JSONDecodeError, or an integer literal past the digit limit
            idx = raw_text.find("{", idx + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        idx = raw_text.find("{", idx + 1)
    raise MalformedResponseError(raw_text.strip()[:EXCERPT_CHARS], context)


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _to_float(value: int | float) -> float:
    """Integers too large for a float saturate to ±inf; the range gate rejects them."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def check_fields(
    obj: dict, context: ErrorContext | None = None,
) -> dict[CostField, float]:
    """Gate 2: every required key present and mapped to a finite number."""
    offending = [
        f.value for f in REQUIRED_FIELDS
        if f.value not in obj or not _is_finite_number(obj[f.value])
    ]
    if offending:
        raise IncompleteFieldsError(offending, context)
    extra = set(obj) - {f.value for f in REQUIRED_FIELDS}
    if extra:
        logger.info("Ignoring extra estimate keys: %s", sorted(extra))
    return {f: _to_float(obj[f.value]) for f in REQUIRED_FIELDS}


def check_ranges(
    values: dict[CostField, float], context: ErrorContext | None = None,
) -> None:
    """Gate 3 (fatal part): each value within [MIN_COST, MAX_COST]."""
    for cost_field in REQUIRED_FIELDS:
        value = values[cost_field]
        if value < MIN_COST:
            raise RangeViolationError(
                cost_field.value, value, MIN_COST, "minimum", context,
            )
        if value > MAX_COST:
            raise RangeViolationError(
                cost_field.value, value, MAX_COST, "maximum", context,
            )


def collect_warnings(
    values: dict[CostField, float], necessity: Necessity | None = None,
) -> list[str]:
    """Gate 3 (advisory part): plausibility warnings that never fail the parse."""
    needed = {
        CostField.FLIGHT: True,
        CostField.ROOMS_PER_NIGHT: necessity.accommodation if necessity else True,
        CostField.FOOD_DAILY: necessity.dining if necessity else True,
    }
    warnings: list[str] = []
    for cost_field in REQUIRED_FIELDS:
        value = values[cost_field]
        if 0 < value < SUSPICIOUSLY_LOW:
            warnings.append(f"{cost_field.value}={value} is suspiciously low")
        elif value == 0 and needed[cost_field] and necessity is not None:
            warnings.append(f"{cost_field.value} is 0 although it is needed")

    flight = values[CostField.FLIGHT]
    rooms = values[CostField.ROOMS_PER_NIGHT]
    if flight > 0 and rooms > flight * LODGING_TO_FLIGHT_RATIO:
        warnings.append(
            f"roomsPerNight={rooms} exceeds {LODGING_TO_FLIGHT_RATIO:g}x flight={flight}"
        )
    return warnings


def parse_estimate(
    raw_text: str,
    necessity: Necessity | None = None,
    context: ErrorContext | None = None,
) -> StructuredEstimate:
    """Run all three gates and build the estimate.

    `context` is attached to any gate error so envelopes name the plan and user.
    """
    obj = extract_json_object(raw_text, context)
    values = check_fields(obj, context)
    check_ranges(values, context)
    warnings = collect_warnings(values, necessity)
    for warning in warnings:
        logger.warning("Estimate plausibility: %s", warning)
    return StructuredEstimate(
        flight=values[CostField.FLIGHT],
        rooms_per_night=values[CostField.ROOMS_PER_NIGHT],
        food_daily=values[CostField.FOOD_DAILY],
        warnings=tuple(warnings),
    )
