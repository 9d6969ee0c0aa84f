"""Error Hierarchy — typed, classified exceptions for every PiggyBank failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries a retryable flag; `kind` exposes it as ErrorKind
    - Invoker errors and parser errors share one base so callers catch PiggyBankError once
    - to_response() produces the REST envelope; internal details stay in debug_info

Design Decisions:
    - Single hierarchy with PiggyBankError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Provider variants are separate classes: callers branch on type, the Invoker
      still classifies by message so the retry gate matches provider wording
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from piggybank.core.domain_types import ErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    FORBIDDEN = "forbidden"
    EXTERNAL_API = "external_api"
    LLM_RESPONSE = "llm_response"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    plan_id: str | None = None
    attempt: int | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class PiggyBankError(Exception):
    """Base exception for all PiggyBank errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.RETRYABLE if self.retryable else ErrorKind.NON_RETRYABLE

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "kind": self.kind.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "plan_id": self.context.plan_id,
                    "attempt": self.context.attempt,
                    "field": self.context.field,
                },
            }
        }


# ─── Invocation Errors ──────────────────────────────────────────

class EmptyPromptError(PiggyBankError):
    """Prompt was empty or whitespace-only — caller misuse, never retried."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Prompt cannot be empty or null",
            "EMPTY_PROMPT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, retryable=False,
        )


class InvocationTimeoutError(PiggyBankError):
    """A single attempt did not settle within the per-attempt timeout."""
    def __init__(self, timeout_ms: int, context: ErrorContext | None = None):
        super().__init__(
            f"LLM request timed out after {timeout_ms}ms",
            "LLM_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 504, retryable=True,
        )
        self.timeout_ms = timeout_ms


class EmptyResponseError(PiggyBankError):
    """Provider call succeeded but returned no text."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "LLM returned empty response",
            "EMPTY_RESPONSE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502, retryable=True,
        )


class ProviderError(PiggyBankError):
    """Generative-text provider call failed."""
    def __init__(
        self,
        message: str,
        code: str = "PROVIDER_ERROR",
        retryable: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL if not retryable else ErrorSeverity.WARNING,
            context, 503 if retryable else 502, retryable=retryable,
        )


class CredentialError(ProviderError):
    """Provider rejected the API key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid API key provided", "PROVIDER_CREDENTIALS", context=context,
        )


class QuotaExceededError(ProviderError):
    """Provider quota or credit balance exhausted."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "API quota exceeded - please try again later",
            "PROVIDER_QUOTA", context=context,
        )


class SafetyFilterError(ProviderError):
    """Provider refused the prompt on safety grounds."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Request blocked by safety filters - please modify your prompt",
            "PROVIDER_SAFETY", context=context,
        )


class ProviderPermissionError(ProviderError):
    """API key lacks permission for the requested model or operation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Permission denied - check your API key permissions",
            "PROVIDER_PERMISSION", context=context,
        )


class UnclassifiedProviderError(ProviderError):
    """Provider failure with no known marker — treated as transient."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Provider API error: {message}", "PROVIDER_ERROR",
            retryable=True, context=context,
        )


class NonRetryableError(PiggyBankError):
    """Retry loop aborted early because the cause will not improve on retry."""
    def __init__(self, cause: Exception, context: ErrorContext | None = None):
        code = getattr(cause, "code", "NON_RETRYABLE")
        http_status = getattr(cause, "http_status", 502)
        super().__init__(
            f"Non-retryable error: {cause}",
            code, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, http_status, retryable=False,
        )
        self.cause = cause


class RetriesExhaustedError(PiggyBankError):
    """Every attempt failed with a retryable error."""
    def __init__(
        self, attempts: int, last_error: Exception | None,
        context: ErrorContext | None = None,
    ):
        last_message = str(last_error) if last_error is not None else "unknown"
        super().__init__(
            f"LLM request failed after {attempts} attempts. "
            f"Last error: {last_message}",
            "LLM_RETRIES_EXHAUSTED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503, retryable=False,
        )
        self.attempts = attempts
        self.last_error = last_error


# ─── Response Validation Errors ─────────────────────────────────

def _plain(number: float) -> str:
    """250000.0 → '250000'; 0.5 → '0.5'."""
    return str(int(number)) if float(number).is_integer() else str(number)


class MalformedResponseError(PiggyBankError):
    """Model output contained no decodable JSON object."""
    def __init__(self, excerpt: str, context: ErrorContext | None = None):
        super().__init__(
            f"LLM response does not contain a JSON object: {excerpt!r}",
            "MALFORMED_RESPONSE", ErrorCategory.LLM_RESPONSE,
            ErrorSeverity.ERROR, context, 502, retryable=False,
        )
        self.excerpt = excerpt


class IncompleteFieldsError(PiggyBankError):
    """Required cost fields missing or not finite numbers."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"LLM response has missing or non-numeric fields: {', '.join(fields)}",
            "INCOMPLETE_FIELDS", ErrorCategory.LLM_RESPONSE,
            ErrorSeverity.ERROR, context, 502, retryable=False,
        )
        self.fields = fields


class RangeViolationError(PiggyBankError):
    """A cost field fell outside its allowed bounds."""
    def __init__(
        self, field: str, value: float, bound: float, bound_name: str,
        context: ErrorContext | None = None,
    ):
        ctx = replace(context, field=field) if context else ErrorContext(field=field)
        relation = "below minimum" if bound_name == "minimum" else "above maximum"
        super().__init__(
            f"{field}={_plain(value)} is {relation} {_plain(bound)}",
            "RANGE_VIOLATION", ErrorCategory.LLM_RESPONSE,
            ErrorSeverity.ERROR, ctx, 422, retryable=False,
        )
        self.field = field
        self.value = value
        self.bound = bound
        self.bound_name = bound_name


# ─── Travel Plan Errors ─────────────────────────────────────────

class TravelPlanNotFoundError(PiggyBankError):
    """Requested travel plan does not exist."""
    def __init__(self, plan_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Travel plan '{plan_id}' not found",
            "TRAVEL_PLAN_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class PlanOwnershipError(PiggyBankError):
    """Travel plan belongs to another user."""
    def __init__(self, user_id: int, plan_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"User {user_id} does not own travel plan '{plan_id}'",
            "PLAN_OWNERSHIP", ErrorCategory.FORBIDDEN,
            ErrorSeverity.ERROR, context, 403,
        )


class InvalidTravelPlanError(PiggyBankError):
    """Travel plan fields violate a business rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = replace(context, field=field) if context else ErrorContext(field=field)
        super().__init__(
            message, "INVALID_TRAVEL_PLAN", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class EstimateMissingError(PiggyBankError):
    """Cost requested before any estimate was generated or entered."""
    def __init__(self, plan_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Travel plan '{plan_id}' has no cost estimate yet",
            "ESTIMATE_MISSING", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
