"""Travel Plan — duration, same-city detection and cost breakdown arithmetic."""

from datetime import date

from piggybank.core.domain_types import EstimateSource, UserId
from piggybank.core.travel_plan import (
    Necessity,
    StructuredEstimate,
    TravelPlan,
    compute_breakdown,
)


def _plan(from_date=date(2030, 1, 1), to_date=date(2030, 1, 6), **kwargs):
    return TravelPlan(
        user_id=UserId(1), from_city=kwargs.pop("from_city", "New York"),
        to_city=kwargs.pop("to_city", "London"),
        from_date=from_date, to_date=to_date, **kwargs,
    )


ESTIMATE = StructuredEstimate(flight=450, rooms_per_night=120, food_daily=60)


def test_duration_is_day_difference():
    assert _plan().duration_days == 5


def test_same_day_trip_counts_one_day():
    assert _plan(to_date=date(2030, 1, 1)).duration_days == 1


def test_same_city_ignores_case_and_whitespace():
    assert _plan(from_city="Paris", to_city=" paris ").same_city
    assert not _plan().same_city


def test_new_plan_defaults():
    plan = _plan()
    assert plan.necessity == Necessity(accommodation=True, dining=True)
    assert plan.estimate is None
    assert _plan().id != plan.id


def test_breakdown_with_full_necessity():
    breakdown = compute_breakdown(_plan(), ESTIMATE)
    assert breakdown.duration_days == 5
    assert breakdown.flight == 450
    assert breakdown.accommodation == 600
    assert breakdown.food == 300
    assert breakdown.total == 1350


def test_breakdown_zeroes_unneeded_costs():
    plan = _plan(necessity=Necessity(accommodation=False, dining=False))
    breakdown = compute_breakdown(plan, ESTIMATE)
    assert breakdown.accommodation == 0
    assert breakdown.food == 0
    assert breakdown.total == 450


def test_estimate_equality_ignores_timestamp():
    other = StructuredEstimate(flight=450, rooms_per_night=120, food_daily=60)
    assert other == ESTIMATE
    assert ESTIMATE.source is EstimateSource.AI


def test_to_wire_uses_camel_case_keys():
    assert ESTIMATE.to_wire() == {"flight": 450, "roomsPerNight": 120, "foodDaily": 60}
