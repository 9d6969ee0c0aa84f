"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the estimation service is wired (readiness)

Design Decisions:
    - Readiness checks wiring only, not the provider: probing the LLM on every
      check would spend quota
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "piggybank-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — estimation service wired on startup."""
    if getattr(request.app.state, "estimation_service", None) is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "estimation_service_unavailable",
            },
        )
    return {"status": "ready", "checks": {"estimation_service": "healthy"}}
