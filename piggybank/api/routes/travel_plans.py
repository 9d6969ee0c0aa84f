"""Travel Plan Routes — CRUD, necessity, AI/manual estimates and cost breakdown.

Invariants:
    - Request bodies validated by Pydantic before reaching the handler
    - Domain errors propagate to the global PiggyBankError handler, except on
      AI estimation where the envelope gains a manual-entry fallback
    - user_id in the path is the plan owner (bookkeeping, not authentication)

Design Decisions:
    - Fallback block built here, not in the service: presenting manual entry is
      an HTTP concern (ADR: service never builds responses)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from piggybank.api.dependencies import get_estimation_service
from piggybank.core.domain_types import PlanId, UserId
from piggybank.core.errors import PiggyBankError
from piggybank.core.prompt_builder import PROMPT_VARIANTS
from piggybank.schemas.travel_plan import (
    CostBreakdownResponse,
    EstimateRequest,
    EstimateResponse,
    ManualEstimateUpdate,
    NecessityUpdate,
    TravelPlanCreate,
    TravelPlanResponse,
)
from piggybank.services.trip_cost_estimation import TripCostEstimation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users/{user_id}/plans", tags=["travel-plans"])


@router.post(
    "", response_model=TravelPlanResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_travel_plan(
    user_id: int, body: TravelPlanCreate,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """Create a travel plan with default necessity (accommodation + dining)."""
    plan = service.create_travel_plan(
        UserId(user_id), body.from_city, body.to_city,
        body.from_date, body.to_date,
    )
    return TravelPlanResponse.from_domain(plan)


@router.get("", response_model=list[TravelPlanResponse])
async def list_travel_plans(
    user_id: int,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """List the user's travel plans."""
    return [
        TravelPlanResponse.from_domain(p)
        for p in service.list_travel_plans(UserId(user_id))
    ]


@router.get("/{plan_id}", response_model=TravelPlanResponse)
async def get_travel_plan(
    user_id: int, plan_id: UUID,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    plan = service.get_travel_plan(UserId(user_id), PlanId(plan_id))
    return TravelPlanResponse.from_domain(plan)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_travel_plan(
    user_id: int, plan_id: UUID,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """Delete the plan and its estimate."""
    service.delete_travel_plan(UserId(user_id), PlanId(plan_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{plan_id}/necessity", response_model=TravelPlanResponse)
async def update_necessity(
    user_id: int, plan_id: UUID, body: NecessityUpdate,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    plan = service.update_necessity(
        UserId(user_id), PlanId(plan_id), body.accommodation, body.dining,
    )
    return TravelPlanResponse.from_domain(plan)


@router.delete("/{plan_id}/necessity", response_model=TravelPlanResponse)
async def reset_necessity(
    user_id: int, plan_id: UUID,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """Reset necessity to accommodation + dining."""
    plan = service.reset_necessity(UserId(user_id), PlanId(plan_id))
    return TravelPlanResponse.from_domain(plan)


@router.post("/{plan_id}/estimate", response_model=EstimateResponse)
async def generate_ai_estimate(
    user_id: int, plan_id: UUID, body: EstimateRequest | None = None,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """Generate an AI estimate; on failure point the client at manual entry."""
    variant = (body or EstimateRequest()).prompt_variant
    try:
        estimate = await service.generate_ai_cost_estimate(
            UserId(user_id), PlanId(plan_id),
            prompt_builder=PROMPT_VARIANTS[variant],
        )
    except PiggyBankError as exc:
        if exc.http_status in (status.HTTP_403_FORBIDDEN, status.HTTP_404_NOT_FOUND):
            raise
        logger.warning(
            f"AI estimate failed, offering manual entry: {exc.message}",
            extra={"error_code": exc.code, "user_id": user_id, "plan_id": str(plan_id)},
        )
        content = exc.to_response()
        content["fallback"] = {
            "manual_entry": f"/api/v1/users/{user_id}/plans/{plan_id}/estimate",
            "method": "PUT",
        }
        return JSONResponse(status_code=exc.http_status, content=content)
    return EstimateResponse.from_domain(estimate)


@router.put("/{plan_id}/estimate", response_model=EstimateResponse)
async def edit_estimate_manually(
    user_id: int, plan_id: UUID, body: ManualEstimateUpdate,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    """Manual cost entry."""
    estimate = service.edit_estimate_manually(
        UserId(user_id), PlanId(plan_id),
        body.flight, body.rooms_per_night, body.food_daily,
    )
    return EstimateResponse.from_domain(estimate)


@router.get("/{plan_id}/cost", response_model=CostBreakdownResponse)
async def get_cost_breakdown(
    user_id: int, plan_id: UUID,
    service: TripCostEstimation = Depends(get_estimation_service),
):
    breakdown = service.get_cost_breakdown(UserId(user_id), PlanId(plan_id))
    return CostBreakdownResponse.from_domain(breakdown)
