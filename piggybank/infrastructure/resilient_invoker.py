"""Resilient Invoker — wraps one TextProvider call with timeout, retry, backoff and classification.

Invariants:
    - Empty/whitespace prompt: EmptyPromptError before any provider call
    - Attempts 0..max_retries, strictly sequential, each bounded by timeout_ms
    - Backoff between attempts = RetryPolicy.backoff_ms(k); never sleeps after the last attempt
    - Non-retryable message → NonRetryableError immediately, no sleep, no further attempts
    - All attempts failed → RetriesExhaustedError citing attempt count and last error
    - Holds no mutable state beyond the frozen RetryPolicy: safe to share across tasks

Design Decisions:
    - asyncio.wait_for races the call against the timer AND cancels the loser, so an
      abandoned attempt cannot keep running or fire side effects later
    - sleep injectable: tests record delays instead of waiting them out
    - CancelledError is BaseException and passes through uncaught (caller cancellation wins)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace

from piggybank.core.classify_errors import is_non_retryable, remap_provider_error
from piggybank.core.errors import (
    EmptyPromptError,
    EmptyResponseError,
    ErrorContext,
    InvocationTimeoutError,
    NonRetryableError,
    PiggyBankError,
    RetriesExhaustedError,
)
from piggybank.core.repository_protocols import TextProvider
from piggybank.core.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ResilientInvoker:
    """Executes prompts against a TextProvider under a fixed RetryPolicy."""

    def __init__(
        self,
        provider: TextProvider,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def execute(self, prompt: str, context: ErrorContext | None = None) -> str:
        """Return the provider's text for `prompt` or raise a classified error."""
        if not prompt or not prompt.strip():
            raise EmptyPromptError(context=context)

        last_error: PiggyBankError | None = None
        for attempt in range(self.policy.total_attempts):
            try:
                text = await self._attempt(prompt)
                logger.info(
                    "LLM call succeeded", extra={"attempt": attempt + 1},
                )
                return text
            except Exception as e:
                error = remap_provider_error(e)
                last_error = error
                if is_non_retryable(error.message):
                    logger.error(
                        f"Attempt {attempt + 1} failed with non-retryable error: {error.message}",
                        extra={"attempt": attempt + 1, "error_code": error.code},
                    )
                    raise NonRetryableError(error, context=context) from e
                if attempt == self.policy.max_retries:
                    break
                delay = self.policy.backoff_ms(attempt)
                logger.warning(
                    f"Attempt {attempt + 1} failed: {error.message}. "
                    f"Retrying in {delay}ms...",
                    extra={
                        "attempt": attempt + 1,
                        "delay_ms": delay,
                        "error_code": error.code,
                    },
                )
                await self._sleep(delay / 1000)

        attempts = self.policy.total_attempts
        ctx = (
            replace(context, attempt=attempts) if context
            else ErrorContext(attempt=attempts)
        )
        raise RetriesExhaustedError(attempts, last_error, context=ctx) from last_error

    async def _attempt(self, prompt: str) -> str:
        """One provider call under the per-attempt timeout."""
        try:
            text = await asyncio.wait_for(
                self.provider.generate(prompt),
                timeout=self.policy.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            raise InvocationTimeoutError(self.policy.timeout_ms)
        if not text or not text.strip():
            raise EmptyResponseError()
        return text
