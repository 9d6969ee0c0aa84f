"""Error Handlers — global exception handlers for the PiggyBank API.

Invariants:
    - PiggyBankError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (PiggyBankError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py: keeps the app module to wiring only
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from piggybank.core.errors import PiggyBankError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register PiggyBank domain/infrastructure error handler."""

    @app.exception_handler(PiggyBankError)
    async def domain_error_handler(request: Request, exc: PiggyBankError):
        """Handle all PiggyBank domain/infrastructure errors.

        4xx are caller mistakes (warning); 5xx mean the provider or model failed (error).
        """
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "user_id": exc.context.user_id,
                "plan_id": exc.context.plan_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
