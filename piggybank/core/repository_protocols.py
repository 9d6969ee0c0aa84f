"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Provider and storage access go through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - TextProvider is async (network IO); TravelPlanRepository is sync because the
      only implementation is in-memory (persistence durability is out of scope)
"""

from typing import Protocol

from piggybank.core.domain_types import PlanId, UserId
from piggybank.core.travel_plan import TravelPlan


class TextProvider(Protocol):
    """Contract for one generative-text call — implemented by shell.

    Returns the raw text or raises with a provider-specific message.
    """
    async def generate(self, prompt: str) -> str: ...


class TravelPlanRepository(Protocol):
    """Contract for travel plan storage — implemented by shell."""
    def add(self, plan: TravelPlan) -> None: ...
    def get(self, plan_id: PlanId) -> TravelPlan | None: ...
    def list_for_user(self, user_id: UserId) -> list[TravelPlan]: ...
    def delete(self, plan_id: PlanId) -> None: ...
