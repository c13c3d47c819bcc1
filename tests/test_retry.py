"""Tests for the async retry helper."""

from __future__ import annotations

import asyncio

import pytest

from aigos.retry import RetryExhaustedError, async_with_retry, backoff_delay


def _run(coro):
    return asyncio.run(coro)


class TestAsyncWithRetry:
    def test_succeeds_first_try(self):
        async def ok():
            return 42

        assert _run(async_with_retry(ok, max_retries=3, base_delay=0.001)) == 42

    def test_succeeds_after_failures(self):
        attempts = {"count": 0}

        async def flaky():
            attempts["count"] += 1
            if attempts["count"] < 3:
                raise ValueError("not yet")
            return "ok"

        result = _run(async_with_retry(flaky, max_retries=3, base_delay=0.001))
        assert result == "ok"
        assert attempts["count"] == 3

    def test_exhausted_raises_with_cause(self):
        async def always_fail():
            raise ValueError("fail")

        with pytest.raises(
            RetryExhaustedError, match="always_fail failed after 3 attempts"
        ) as exc_info:
            _run(async_with_retry(always_fail, max_retries=2, base_delay=0.001))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_non_retryable_raises_immediately(self):
        attempts = {"count": 0}

        async def fail_type_error():
            attempts["count"] += 1
            raise TypeError("bad type")

        with pytest.raises(TypeError):
            _run(
                async_with_retry(
                    fail_type_error,
                    max_retries=3,
                    base_delay=0.001,
                    retryable=(ValueError,),
                )
            )
        assert attempts["count"] == 1  # No retries

    def test_zero_retries_means_single_attempt(self):
        attempts = {"count": 0}

        async def fail():
            attempts["count"] += 1
            raise ValueError("fail")

        with pytest.raises(RetryExhaustedError):
            _run(async_with_retry(fail, max_retries=0, base_delay=0.001))
        assert attempts["count"] == 1

    def test_retry_after_hint_is_used(self, monkeypatch):
        slept: list[float] = []

        async def fake_sleep(delay):
            slept.append(delay)

        monkeypatch.setattr("aigos.retry.asyncio.sleep", fake_sleep)

        class RateLimited(Exception):
            retry_after = 7.0

        attempts = {"count": 0}

        async def limited():
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise RateLimited("slow down")
            return "ok"

        assert _run(async_with_retry(limited, max_retries=1, max_delay=30.0)) == "ok"
        assert slept == [7.0]


class TestBackoffDelay:
    def test_exponential_without_jitter(self):
        delays = [backoff_delay(n, base_delay=1.0, max_delay=30.0, jitter=False) for n in range(4)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_max_delay(self):
        assert backoff_delay(10, base_delay=1.0, max_delay=5.0, jitter=False) == 5.0

    def test_jitter_stays_within_bounds(self):
        for _ in range(20):
            delay = backoff_delay(2, base_delay=1.0, max_delay=30.0, jitter=True)
            assert 2.0 <= delay <= 6.0

    def test_hint_overrides_and_is_capped(self):
        assert backoff_delay(0, base_delay=1.0, max_delay=30.0, jitter=True, hint=3.0) == 3.0
        assert backoff_delay(0, base_delay=1.0, max_delay=10.0, jitter=True, hint=60.0) == 10.0
