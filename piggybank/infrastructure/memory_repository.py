"""In-Memory Travel Plan Repository — dict-backed TravelPlanRepository.

Invariants:
    - One dict keyed by PlanId is the single source of truth
    - list_for_user returns plans in insertion order

Design Decisions:
    - In-memory over DB: persistence durability is out of scope; state lost on
      restart is acceptable (ADR: single-process uvicorn)
"""

from piggybank.core.domain_types import PlanId, UserId
from piggybank.core.travel_plan import TravelPlan


class InMemoryTravelPlanRepository:
    """Stores travel plans in a process-local dict."""

    def __init__(self) -> None:
        self._plans: dict[PlanId, TravelPlan] = {}

    def add(self, plan: TravelPlan) -> None:
        self._plans[plan.id] = plan

    def get(self, plan_id: PlanId) -> TravelPlan | None:
        return self._plans.get(plan_id)

    def list_for_user(self, user_id: UserId) -> list[TravelPlan]:
        return [p for p in self._plans.values() if p.user_id == user_id]

    def delete(self, plan_id: PlanId) -> None:
        self._plans.pop(plan_id, None)
