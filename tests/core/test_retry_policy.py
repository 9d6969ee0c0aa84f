"""Retry Policy — backoff schedule, validation and immutability."""

from dataclasses import FrozenInstanceError
from types import SimpleNamespace

import pytest

from piggybank.core.retry_policy import RetryPolicy


def test_defaults():
    policy = RetryPolicy()
    assert policy.max_retries == 3
    assert policy.base_delay_ms == 1000
    assert policy.max_delay_ms == 10_000
    assert policy.timeout_ms == 30_000
    assert policy.total_attempts == 4


def test_backoff_doubles_then_caps():
    policy = RetryPolicy()
    assert [policy.backoff_ms(k) for k in range(6)] == [
        1000, 2000, 4000, 8000, 10_000, 10_000,
    ]


def test_backoff_has_no_jitter():
    policy = RetryPolicy(base_delay_ms=250)
    assert {policy.backoff_ms(2) for _ in range(20)} == {1000}


def test_policy_is_frozen():
    policy = RetryPolicy()
    with pytest.raises(FrozenInstanceError):
        policy.max_retries = 10  # type: ignore[misc]


@pytest.mark.parametrize("kwargs", [
    {"max_retries": -1},
    {"base_delay_ms": -1},
    {"max_delay_ms": -1},
    {"timeout_ms": 0},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_from_settings():
    settings = SimpleNamespace(
        llm_max_retries=5, llm_base_delay_ms=200,
        llm_max_delay_ms=800, llm_timeout_ms=5000,
    )
    assert RetryPolicy.from_settings(settings) == RetryPolicy(5, 200, 800, 5000)
