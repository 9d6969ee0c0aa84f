"""Structured Logging — JSON log lines for invoker retries and travel-plan operations.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (attempt, delay_ms, error_code, plan_id, user_id, field) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - Fixed whitelist of extra keys: retry attempts, backoff delays and plan ids
      become top-level JSON fields, anything else stays out of the line
    - default=str: UUIDs and datetimes passed as extras serialize without a custom encoder
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "attempt", "delay_ms", "error_code", "plan_id", "user_id", "field",
    "input_tokens", "output_tokens", "path",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
