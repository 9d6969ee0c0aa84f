"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int, PlanId wraps UUID — never use bare primitives in domain logic
    - Cost fields keep their wire names (flight, roomsPerNight, foodDaily) in CostField values
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
PlanId = NewType("PlanId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Usd = NewType("Usd", float)   # 0.0–100000.0 per cost field


# ─── Enums ───────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    """Retry classification attached to every PiggyBankError."""
    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"


class CostField(str, Enum):
    """The 3 required fields of a cost estimate, keyed by wire name."""
    FLIGHT = "flight"
    ROOMS_PER_NIGHT = "roomsPerNight"
    FOOD_DAILY = "foodDaily"


class EstimateSource(str, Enum):
    """Where the stored estimate came from."""
    AI = "ai"
    MANUAL = "manual"
