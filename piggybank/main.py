"""PiggyBank API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PiggyBankError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Estimation service (provider → invoker → service) built once in lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - build_estimation_service separated from lifespan: same wiring reused by
      scripts and tests without starting the app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from piggybank.api.error_handlers import register_error_handlers
from piggybank.api.routes import health, travel_plans
from piggybank.config import Settings, get_settings
from piggybank.core.retry_policy import RetryPolicy
from piggybank.infrastructure.anthropic_client import AnthropicTextProvider
from piggybank.infrastructure.memory_repository import InMemoryTravelPlanRepository
from piggybank.infrastructure.observability import setup_logging
from piggybank.infrastructure.resilient_invoker import ResilientInvoker
from piggybank.services.trip_cost_estimation import TripCostEstimation

logger = logging.getLogger(__name__)


def build_estimation_service(settings: Settings) -> TripCostEstimation:
    """Wire provider → resilient invoker → estimation service."""
    provider = AnthropicTextProvider(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.llm_max_output_tokens,
        temperature=settings.llm_temperature,
    )
    invoker = ResilientInvoker(provider, RetryPolicy.from_settings(settings))
    return TripCostEstimation(InMemoryTravelPlanRepository(), invoker)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.estimation_service = build_estimation_service(settings)
    logger.info("PiggyBank API started")
    yield
    logger.info("PiggyBank API shutting down")


app = FastAPI(
    title="PiggyBank API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(travel_plans.router)

register_error_handlers(app)
