"""Travel Plan Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - TravelPlanCreate cities: 1-200 chars, stripped, non-empty; to_date >= from_date
    - ManualEstimateUpdate values: finite, 0-100000
    - EstimateRequest.prompt_variant must name a registered prompt builder

Design Decisions:
    - Field aliases keep the camelCase wire names (roomsPerNight, foodDaily) while
      Python attributes stay snake_case; populate_by_name accepts both
    - from_domain classmethods keep dataclass → schema mapping out of routes
"""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from piggybank.core.parse_estimate import MAX_COST
from piggybank.core.travel_plan import CostBreakdown, StructuredEstimate, TravelPlan


class TravelPlanCreate(BaseModel):
    """Travel plan creation — validates cities and date order."""
    from_city: str = Field(min_length=1, max_length=200)
    to_city: str = Field(min_length=1, max_length=200)
    from_date: date
    to_date: date

    @field_validator("from_city", "to_city")
    @classmethod
    def strip_city(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("city cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def to_date_after_from_date(self) -> "TravelPlanCreate":
        if self.to_date < self.from_date:
            raise ValueError("to_date must be on or after from_date")
        return self


class NecessityUpdate(BaseModel):
    """Accommodation/dining flags."""
    accommodation: bool
    dining: bool


class EstimateRequest(BaseModel):
    """AI estimate request — selects the prompt variant."""
    prompt_variant: Literal[
        "default", "explicit_validation", "context_aware", "error_handling",
    ] = "default"


class ManualEstimateUpdate(BaseModel):
    """Manual cost entry — fallback when AI estimation fails."""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    flight: float = Field(ge=0, le=MAX_COST)
    rooms_per_night: float = Field(alias="roomsPerNight", ge=0, le=MAX_COST)
    food_daily: float = Field(alias="foodDaily", ge=0, le=MAX_COST)


class EstimateResponse(BaseModel):
    """Stored estimate — public-facing per-unit costs."""
    model_config = ConfigDict(populate_by_name=True)

    flight: float
    rooms_per_night: float = Field(serialization_alias="roomsPerNight")
    food_daily: float = Field(serialization_alias="foodDaily")
    generated_at: datetime
    source: str
    warnings: list[str] = []

    @classmethod
    def from_domain(cls, estimate: StructuredEstimate) -> "EstimateResponse":
        return cls(
            flight=estimate.flight,
            rooms_per_night=estimate.rooms_per_night,
            food_daily=estimate.food_daily,
            generated_at=estimate.generated_at,
            source=estimate.source.value,
            warnings=list(estimate.warnings),
        )


class TravelPlanResponse(BaseModel):
    """Travel plan response — public-facing plan data."""
    id: UUID
    user_id: int
    from_city: str
    to_city: str
    from_date: date
    to_date: date
    duration_days: int
    accommodation: bool
    dining: bool
    estimate: EstimateResponse | None = None

    @classmethod
    def from_domain(cls, plan: TravelPlan) -> "TravelPlanResponse":
        return cls(
            id=plan.id,
            user_id=plan.user_id,
            from_city=plan.from_city,
            to_city=plan.to_city,
            from_date=plan.from_date,
            to_date=plan.to_date,
            duration_days=plan.duration_days,
            accommodation=plan.necessity.accommodation,
            dining=plan.necessity.dining,
            estimate=(
                EstimateResponse.from_domain(plan.estimate)
                if plan.estimate else None
            ),
        )


class CostBreakdownResponse(BaseModel):
    """Totals over the trip duration."""
    duration_days: int
    flight: float
    accommodation: float
    food: float
    total: float

    @classmethod
    def from_domain(cls, breakdown: CostBreakdown) -> "CostBreakdownResponse":
        return cls(
            duration_days=breakdown.duration_days,
            flight=breakdown.flight,
            accommodation=breakdown.accommodation,
            food=breakdown.food,
            total=breakdown.total,
        )
