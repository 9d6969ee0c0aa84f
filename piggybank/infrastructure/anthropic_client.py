"""Anthropic Text Provider — one Messages API call, text in, text out.

Invariants:
    - SDK-level retries disabled (max_retries=0): ResilientInvoker is the only retry layer
    - Fixed low temperature and bounded max_tokens for repeatable estimates
    - SDK exceptions propagate unchanged; their messages carry the provider
      error type (authentication_error, permission_error, ...) that the invoker remaps
    - A refusal stop_reason is raised as an error, never returned as text

Design Decisions:
    - Thin adapter over AsyncAnthropic: satisfies the TextProvider protocol so the
      invoker stays provider-agnostic (ADR: single responsibility)
    - Client injectable: tests pass a fake with the same messages.create shape
"""

import logging

import anthropic

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.1


class ProviderRefusal(Exception):
    """Model declined to answer (stop_reason == "refusal")."""


class AnthropicTextProvider:
    """Wraps AsyncAnthropic.messages.create behind TextProvider.generate()."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        client=None,
    ):
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key, max_retries=0,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, prompt: str) -> str:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        if response.stop_reason == "refusal":
            raise ProviderRefusal("refusal: model declined the request")
        self._log_success(response)
        return "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )

    def _log_success(self, response) -> None:
        """Log successful API call with token usage."""
        usage = response.usage
        logger.info(
            "Anthropic API success",
            extra={
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )
