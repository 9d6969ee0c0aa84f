"""Error Classification — maps provider wording to typed errors and retry decisions.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - is_non_retryable matches case-insensitive substrings of the error message
    - remap_provider_error never re-wraps an already classified PiggyBankError

Design Decisions:
    - Substring matching over status codes: the invoker boundary only sees a message.
      Known fragility — depends on exact provider wording (ADR: documented, not hidden)
    - First matching marker group wins; order puts credentials before permission
      because Anthropic 401 bodies mention both
"""

from piggybank.core.errors import (
    CredentialError,
    PiggyBankError,
    ProviderPermissionError,
    QuotaExceededError,
    SafetyFilterError,
    UnclassifiedProviderError,
)

NON_RETRYABLE_MARKERS: tuple[str, ...] = (
    "invalid api key",
    "permission denied",
    "quota exceeded",
    "safety",
    "prompt cannot be empty",
)

# Provider-specific substrings → clarified error type
_PROVIDER_MARKERS: tuple[tuple[tuple[str, ...], type[PiggyBankError]], ...] = (
    (("api_key_invalid", "authentication_error", "invalid x-api-key"), CredentialError),
    (("quota_exceeded", "quota exceeded", "credit balance is too low"), QuotaExceededError),
    (("safety", "refusal"), SafetyFilterError),
    (("permission_denied", "permission_error"), ProviderPermissionError),
)


def is_non_retryable(message: str) -> bool:
    """True when the message names a failure that retrying will not fix."""
    lowered = message.lower()
    return any(marker in lowered for marker in NON_RETRYABLE_MARKERS)


def remap_provider_error(error: Exception) -> PiggyBankError:
    """Translate a raw provider exception into a clarified, typed error."""
    if isinstance(error, PiggyBankError):
        return error
    message = str(error)
    lowered = message.lower()
    for markers, error_cls in _PROVIDER_MARKERS:
        if any(marker in lowered for marker in markers):
            return error_cls()
    return UnclassifiedProviderError(message)
