"""Trip Cost Estimation — travel plan lifecycle around the resilient invoker and parser.

Invariants:
    - Every plan operation checks ownership: unknown id → TravelPlanNotFoundError,
      other user's plan → PlanOwnershipError
    - create_travel_plan: cities non-empty, to_date >= from_date, from_date not in the past
    - Changing or resetting necessity clears the stored estimate (it was priced
      for the old flags)
    - AI and manual estimates pass the same range gate; nothing is coerced to a default
    - estimate_cost(...) == get_cost_breakdown(...).total

Design Decisions:
    - Prompt builder injected at construction and overridable per call — never
      swapped by assigning to a field on a shared instance
    - clock injectable: date rules testable without freezing time
    - Service raises PiggyBankError subclasses; HTTP mapping stays in api/
"""

import logging
from collections.abc import Callable
from datetime import date

from piggybank.core.domain_types import CostField, EstimateSource, PlanId, UserId
from piggybank.core.errors import (
    ErrorContext,
    EstimateMissingError,
    InvalidTravelPlanError,
    PlanOwnershipError,
    TravelPlanNotFoundError,
)
from piggybank.core.parse_estimate import (
    check_fields,
    check_ranges,
    collect_warnings,
    parse_estimate,
)
from piggybank.core.prompt_builder import PromptBuilder, build_cost_estimation_prompt
from piggybank.core.repository_protocols import TravelPlanRepository
from piggybank.core.travel_plan import (
    CostBreakdown,
    Necessity,
    StructuredEstimate,
    TravelPlan,
    compute_breakdown,
)
from piggybank.infrastructure.resilient_invoker import ResilientInvoker

logger = logging.getLogger(__name__)


class TripCostEstimation:
    """Owns travel plans and their cost estimates for all users."""

    def __init__(
        self,
        repository: TravelPlanRepository,
        invoker: ResilientInvoker,
        prompt_builder: PromptBuilder = build_cost_estimation_prompt,
        clock: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.invoker = invoker
        self.prompt_builder = prompt_builder
        self._clock = clock

    # ─── Plan lifecycle ─────────────────────────────────────────

    def create_travel_plan(
        self,
        user_id: UserId,
        from_city: str,
        to_city: str,
        from_date: date,
        to_date: date,
    ) -> TravelPlan:
        from_city, to_city = from_city.strip(), to_city.strip()
        if not from_city:
            raise InvalidTravelPlanError("from_city cannot be empty", "from_city")
        if not to_city:
            raise InvalidTravelPlanError("to_city cannot be empty", "to_city")
        if to_date < from_date:
            raise InvalidTravelPlanError(
                "to_date must be on or after from_date", "to_date",
            )
        if from_date < self._clock():
            raise InvalidTravelPlanError(
                "from_date cannot be in the past", "from_date",
            )
        plan = TravelPlan(
            user_id=user_id, from_city=from_city, to_city=to_city,
            from_date=from_date, to_date=to_date,
        )
        self.repository.add(plan)
        logger.info(
            f"Created travel plan {from_city} → {to_city}",
            extra={"user_id": user_id, "plan_id": str(plan.id)},
        )
        return plan

    def get_travel_plan(self, user_id: UserId, plan_id: PlanId) -> TravelPlan:
        plan = self.repository.get(plan_id)
        if plan is None:
            raise TravelPlanNotFoundError(
                str(plan_id), ErrorContext(user_id=user_id, plan_id=str(plan_id)),
            )
        if plan.user_id != user_id:
            raise PlanOwnershipError(
                user_id, str(plan_id),
                ErrorContext(user_id=user_id, plan_id=str(plan_id)),
            )
        return plan

    def list_travel_plans(self, user_id: UserId) -> list[TravelPlan]:
        return self.repository.list_for_user(user_id)

    def delete_travel_plan(self, user_id: UserId, plan_id: PlanId) -> None:
        self.get_travel_plan(user_id, plan_id)
        self.repository.delete(plan_id)
        logger.info(
            "Deleted travel plan",
            extra={"user_id": user_id, "plan_id": str(plan_id)},
        )

    def update_necessity(
        self, user_id: UserId, plan_id: PlanId, accommodation: bool, dining: bool,
    ) -> TravelPlan:
        plan = self.get_travel_plan(user_id, plan_id)
        new = Necessity(accommodation=accommodation, dining=dining)
        if new != plan.necessity:
            plan.necessity = new
            plan.estimate = None
        return plan

    def reset_necessity(self, user_id: UserId, plan_id: PlanId) -> TravelPlan:
        return self.update_necessity(user_id, plan_id, True, True)

    # ─── Estimates ──────────────────────────────────────────────

    async def generate_ai_cost_estimate(
        self,
        user_id: UserId,
        plan_id: PlanId,
        prompt_builder: PromptBuilder | None = None,
    ) -> StructuredEstimate:
        """Render the prompt, invoke the model, validate and store the estimate."""
        plan = self.get_travel_plan(user_id, plan_id)
        build = prompt_builder or self.prompt_builder
        prompt = build(plan)
        context = ErrorContext(user_id=user_id, plan_id=str(plan_id))
        raw_text = await self.invoker.execute(prompt, context=context)
        estimate = parse_estimate(raw_text, plan.necessity, context)
        plan.estimate = estimate
        logger.info(
            "Stored AI cost estimate",
            extra={"user_id": user_id, "plan_id": str(plan_id)},
        )
        return estimate

    def edit_estimate_manually(
        self,
        user_id: UserId,
        plan_id: PlanId,
        flight: float,
        rooms_per_night: float,
        food_daily: float,
    ) -> StructuredEstimate:
        """Manual fallback when AI estimation fails or the user disagrees."""
        plan = self.get_travel_plan(user_id, plan_id)
        context = ErrorContext(user_id=user_id, plan_id=str(plan_id))
        values = check_fields({
            CostField.FLIGHT.value: flight,
            CostField.ROOMS_PER_NIGHT.value: rooms_per_night,
            CostField.FOOD_DAILY.value: food_daily,
        }, context)
        check_ranges(values, context)
        estimate = StructuredEstimate(
            flight=values[CostField.FLIGHT],
            rooms_per_night=values[CostField.ROOMS_PER_NIGHT],
            food_daily=values[CostField.FOOD_DAILY],
            warnings=tuple(collect_warnings(values, plan.necessity)),
            source=EstimateSource.MANUAL,
        )
        plan.estimate = estimate
        return estimate

    def get_cost_breakdown(self, user_id: UserId, plan_id: PlanId) -> CostBreakdown:
        plan = self.get_travel_plan(user_id, plan_id)
        if plan.estimate is None:
            raise EstimateMissingError(
                str(plan_id), ErrorContext(user_id=user_id, plan_id=str(plan_id)),
            )
        return compute_breakdown(plan, plan.estimate)

    def estimate_cost(self, user_id: UserId, plan_id: PlanId) -> float:
        return self.get_cost_breakdown(user_id, plan_id).total
