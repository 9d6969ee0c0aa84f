"""Retry Policy — immutable timeout/backoff configuration for the resilient invoker.

Invariants:
    - Frozen: fixed for the lifetime of an invoker, never mutated mid-flight
    - backoff_ms(k) = min(base_delay_ms * 2**k, max_delay_ms), no jitter
    - total attempts = max_retries + 1

Design Decisions:
    - Deterministic backoff (no jitter): a single caller per invoker, so no
      thundering herd to spread out, and tests can assert exact delays
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Timeout and exponential-backoff settings for one invoker."""

    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 10_000
    timeout_ms: int = 30_000

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must be >= 0")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_ms(self, attempt: int) -> int:
        """Delay before the attempt that follows failed attempt `attempt`."""
        return min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.llm_max_retries,
            base_delay_ms=settings.llm_base_delay_ms,
            max_delay_ms=settings.llm_max_delay_ms,
            timeout_ms=settings.llm_timeout_ms,
        )
