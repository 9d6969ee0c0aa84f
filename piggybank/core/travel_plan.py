"""Travel Plan — trip state, structured estimate and pure cost arithmetic.

Invariants:
    - StructuredEstimate is frozen; equality ignores generated_at
    - Necessity defaults to accommodation + dining (both True)
    - duration_days >= 1: a same-day trip still counts as one day
    - Costs for unneeded necessities contribute 0 to the breakdown
    - CostBreakdown.total == flight + accommodation + food

Design Decisions:
    - Dataclasses with computed properties: pure, deterministic, testable without mocks
    - TravelPlan is mutable (necessity, estimate change over its life);
      StructuredEstimate is not (created once by the parser or manual entry)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import uuid4

from piggybank.core.domain_types import EstimateSource, PlanId, UserId


@dataclass(frozen=True)
class StructuredEstimate:
    """Validated per-unit costs in USD for one travel plan."""

    flight: float
    rooms_per_night: float
    food_daily: float
    generated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False,
    )
    warnings: tuple[str, ...] = ()
    source: EstimateSource = EstimateSource.AI

    def to_wire(self) -> dict[str, float]:
        return {
            "flight": self.flight,
            "roomsPerNight": self.rooms_per_night,
            "foodDaily": self.food_daily,
        }


@dataclass(frozen=True)
class Necessity:
    """Whether the traveller pays for lodging and meals."""
    accommodation: bool = True
    dining: bool = True


@dataclass(frozen=True)
class CostBreakdown:
    """Totals derived from an estimate and the trip duration."""
    duration_days: int
    flight: float
    accommodation: float
    food: float

    @property
    def total(self) -> float:
        return self.flight + self.accommodation + self.food


@dataclass
class TravelPlan:
    """One user's trip between two cities."""

    user_id: UserId
    from_city: str
    to_city: str
    from_date: date
    to_date: date
    necessity: Necessity = field(default_factory=Necessity)
    estimate: StructuredEstimate | None = None
    id: PlanId = field(default_factory=lambda: PlanId(uuid4()))

    @property
    def duration_days(self) -> int:
        return max((self.to_date - self.from_date).days, 1)

    @property
    def same_city(self) -> bool:
        return self.from_city.strip().lower() == self.to_city.strip().lower()


def compute_breakdown(plan: TravelPlan, estimate: StructuredEstimate) -> CostBreakdown:
    """Expand per-unit costs over the trip duration."""
    days = plan.duration_days
    accommodation = (
        estimate.rooms_per_night * days if plan.necessity.accommodation else 0.0
    )
    food = estimate.food_daily * days if plan.necessity.dining else 0.0
    return CostBreakdown(
        duration_days=days,
        flight=estimate.flight,
        accommodation=accommodation,
        food=food,
    )
