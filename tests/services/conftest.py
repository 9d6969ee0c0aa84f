"""Service test fixtures — estimation service over a scripted provider + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory repository
    - The provider is scripted (ScriptedProvider): no network, no API key
    - Backoff sleeps are recorded, never awaited
    - get_estimation_service overridden so routes use the test service

Design Decisions:
    - Fixed clock (TODAY): "from_date not in the past" rules stay deterministic
    - ASGITransport skips lifespan: the override is the only wiring routes see
"""

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

from piggybank.api.dependencies import get_estimation_service
from piggybank.core.retry_policy import RetryPolicy
from piggybank.infrastructure.memory_repository import InMemoryTravelPlanRepository
from piggybank.infrastructure.resilient_invoker import ResilientInvoker
from piggybank.main import app
from piggybank.services.trip_cost_estimation import TripCostEstimation

from tests.infrastructure.mock_provider import (
    RecordingSleep,
    ScriptedProvider,
    VALID_JSON,
)

TODAY = date(2030, 1, 1)


@pytest.fixture
def provider():
    return ScriptedProvider([VALID_JSON])


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def service(provider, recording_sleep):
    invoker = ResilientInvoker(provider, RetryPolicy(), sleep=recording_sleep)
    return TripCostEstimation(
        InMemoryTravelPlanRepository(), invoker, clock=lambda: TODAY,
    )


@pytest.fixture
async def client(service):
    """FastAPI test client with the estimation service overridden."""
    app.dependency_overrides[get_estimation_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
