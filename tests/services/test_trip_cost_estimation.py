"""TripCostEstimation — plan lifecycle, AI/manual estimates and cost breakdown.

Tests cover:
    - create_travel_plan validation (cities, date order, past dates)
    - Ownership: unknown plan → not found, other user's plan → forbidden
    - Necessity changes clear the stored estimate
    - AI estimate goes through the invoker and the parser, nothing coerced
    - Manual estimate passes the same range gate
    - estimate_cost == breakdown total
"""

from datetime import date
from uuid import uuid4

import pytest

from piggybank.core.domain_types import EstimateSource, PlanId, UserId
from piggybank.core.errors import (
    EstimateMissingError,
    IncompleteFieldsError,
    InvalidTravelPlanError,
    MalformedResponseError,
    NonRetryableError,
    PlanOwnershipError,
    RangeViolationError,
    RetriesExhaustedError,
    TravelPlanNotFoundError,
)
from piggybank.core.prompt_builder import build_context_aware_prompt
from piggybank.core.travel_plan import Necessity

ALICE = UserId(1)
BOB = UserId(2)


def _create(service, user_id=ALICE, **kwargs):
    args = {
        "from_city": "New York", "to_city": "London",
        "from_date": date(2030, 6, 1), "to_date": date(2030, 6, 6),
    }
    args.update(kwargs)
    return service.create_travel_plan(user_id, **args)


# ─── Plan lifecycle ──────────────────────────────────────────────

def test_create_plan_defaults(service):
    plan = _create(service, from_city="  New York ")
    assert plan.from_city == "New York"
    assert plan.necessity == Necessity()
    assert plan.estimate is None
    assert service.get_travel_plan(ALICE, plan.id) is plan


@pytest.mark.parametrize("kwargs, field", [
    ({"from_city": "   "}, "from_city"),
    ({"to_city": ""}, "to_city"),
    ({"to_date": date(2030, 5, 31)}, "to_date"),
    ({"from_date": date(2029, 12, 31)}, "from_date"),
])
def test_create_plan_rejects_invalid_fields(service, kwargs, field):
    with pytest.raises(InvalidTravelPlanError) as exc_info:
        _create(service, **kwargs)
    assert exc_info.value.field == field
    assert service.list_travel_plans(ALICE) == []


def test_plan_starting_today_is_allowed(service):
    plan = _create(service, from_date=date(2030, 1, 1), to_date=date(2030, 1, 1))
    assert plan.duration_days == 1


def test_list_only_returns_own_plans(service):
    first = _create(service)
    second = _create(service, to_city="Paris")
    _create(service, user_id=BOB)
    assert service.list_travel_plans(ALICE) == [first, second]


def test_unknown_plan_not_found(service):
    with pytest.raises(TravelPlanNotFoundError):
        service.get_travel_plan(ALICE, PlanId(uuid4()))


def test_other_users_plan_forbidden(service):
    plan = _create(service)
    with pytest.raises(PlanOwnershipError):
        service.get_travel_plan(BOB, plan.id)
    with pytest.raises(PlanOwnershipError):
        service.delete_travel_plan(BOB, plan.id)


def test_delete_plan(service):
    plan = _create(service)
    service.delete_travel_plan(ALICE, plan.id)
    with pytest.raises(TravelPlanNotFoundError):
        service.get_travel_plan(ALICE, plan.id)


# ─── Necessity ───────────────────────────────────────────────────

async def test_changing_necessity_clears_estimate(service):
    plan = _create(service)
    await service.generate_ai_cost_estimate(ALICE, plan.id)

    updated = service.update_necessity(ALICE, plan.id, accommodation=False, dining=True)

    assert updated.necessity == Necessity(accommodation=False, dining=True)
    assert updated.estimate is None


async def test_same_necessity_keeps_estimate(service):
    plan = _create(service)
    await service.generate_ai_cost_estimate(ALICE, plan.id)

    service.update_necessity(ALICE, plan.id, accommodation=True, dining=True)

    assert plan.estimate is not None


def test_reset_necessity_restores_defaults(service):
    plan = _create(service)
    service.update_necessity(ALICE, plan.id, False, False)
    service.edit_estimate_manually(ALICE, plan.id, 450, 0, 0)

    service.reset_necessity(ALICE, plan.id)

    assert plan.necessity == Necessity()
    assert plan.estimate is None


# ─── AI estimates ────────────────────────────────────────────────

async def test_ai_estimate_stored_on_plan(service, provider):
    plan = _create(service)

    estimate = await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert (estimate.flight, estimate.rooms_per_night, estimate.food_daily) == (450, 120, 60)
    assert estimate.source is EstimateSource.AI
    assert plan.estimate is estimate
    assert len(provider.calls) == 1
    assert "New York" in provider.calls[0]


async def test_prompt_builder_override_per_call(service, provider):
    plan = _create(service)

    await service.generate_ai_cost_estimate(
        ALICE, plan.id, prompt_builder=build_context_aware_prompt,
    )

    assert "TRIP ANALYSIS" in provider.calls[0]
    # The service default is unchanged for later calls
    await service.generate_ai_cost_estimate(ALICE, plan.id)
    assert "TRIP ANALYSIS" not in provider.calls[1]


async def test_unparseable_response_is_not_stored(service, provider):
    provider.steps = ["I am not able to estimate that."]
    plan = _create(service)

    with pytest.raises(MalformedResponseError):
        await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert plan.estimate is None


async def test_non_numeric_field_is_not_coerced(service, provider):
    provider.steps = ['{"flight": 450, "roomsPerNight": "expensive", "foodDaily": 60}']
    plan = _create(service)

    with pytest.raises(IncompleteFieldsError) as exc_info:
        await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert exc_info.value.fields == ["roomsPerNight"]
    assert plan.estimate is None


async def test_quota_error_surfaces_without_retry(service, provider, recording_sleep):
    provider.steps = [RuntimeError("quota exceeded")]
    plan = _create(service)

    with pytest.raises(NonRetryableError):
        await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert len(provider.calls) == 1
    assert recording_sleep.delays == []


async def test_transient_failures_exhaust_retries(service, provider):
    provider.steps = [ConnectionError("connection reset")]
    plan = _create(service)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert exc_info.value.context.plan_id == str(plan.id)
    assert exc_info.value.context.user_id == ALICE


async def test_ai_estimate_requires_ownership(service, provider):
    plan = _create(service)
    with pytest.raises(PlanOwnershipError):
        await service.generate_ai_cost_estimate(BOB, plan.id)
    assert provider.calls == []


# ─── Manual estimates ────────────────────────────────────────────

def test_manual_estimate_stored(service):
    plan = _create(service)

    estimate = service.edit_estimate_manually(ALICE, plan.id, 500, 100, 40)

    assert estimate.source is EstimateSource.MANUAL
    assert plan.estimate is estimate


def test_manual_estimate_range_checked(service):
    plan = _create(service)
    with pytest.raises(RangeViolationError) as exc_info:
        service.edit_estimate_manually(ALICE, plan.id, 500, 100, 250_000)
    assert exc_info.value.field == "foodDaily"
    assert plan.estimate is None


def test_manual_estimate_rejects_nan(service):
    plan = _create(service)
    with pytest.raises(IncompleteFieldsError):
        service.edit_estimate_manually(ALICE, plan.id, float("nan"), 100, 40)


# ─── Cost breakdown ──────────────────────────────────────────────

async def test_breakdown_over_trip_duration(service):
    plan = _create(service)
    await service.generate_ai_cost_estimate(ALICE, plan.id)

    breakdown = service.get_cost_breakdown(ALICE, plan.id)

    assert breakdown.duration_days == 5
    assert breakdown.accommodation == 600
    assert breakdown.food == 300
    assert breakdown.total == 1350
    assert service.estimate_cost(ALICE, plan.id) == 1350


def test_breakdown_respects_necessity(service):
    plan = _create(service)
    service.update_necessity(ALICE, plan.id, accommodation=False, dining=True)
    service.edit_estimate_manually(ALICE, plan.id, 450, 120, 60)

    assert service.estimate_cost(ALICE, plan.id) == 450 + 60 * 5


def test_breakdown_without_estimate(service):
    plan = _create(service)
    with pytest.raises(EstimateMissingError):
        service.get_cost_breakdown(ALICE, plan.id)


# ─── Error context ───────────────────────────────────────────────

async def test_parse_errors_name_the_plan(service, provider):
    provider.steps = ["I am not able to estimate that."]
    plan = _create(service)

    with pytest.raises(MalformedResponseError) as exc_info:
        await service.generate_ai_cost_estimate(ALICE, plan.id)

    assert exc_info.value.context.user_id == ALICE
    assert exc_info.value.context.plan_id == str(plan.id)


def test_manual_range_error_names_the_plan(service):
    plan = _create(service)
    with pytest.raises(RangeViolationError) as exc_info:
        service.edit_estimate_manually(ALICE, plan.id, 500, 100, 250_000)
    assert exc_info.value.context.plan_id == str(plan.id)
    assert exc_info.value.context.field == "foodDaily"
