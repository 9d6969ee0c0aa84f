"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Retry settings are read once into an immutable RetryPolicy at startup

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Anthropic
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_model: str = "claude-haiku-4-5"

    # LLM call shape — low temperature for consistent estimates
    llm_temperature: float = Field(0.1, ge=0.0, le=1.0)
    llm_max_output_tokens: int = Field(1000, ge=1)

    # Resilient invoker
    llm_max_retries: int = Field(3, ge=0)
    llm_base_delay_ms: int = Field(1000, ge=0)
    llm_max_delay_ms: int = Field(10_000, ge=0)
    llm_timeout_ms: int = Field(30_000, gt=0)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
