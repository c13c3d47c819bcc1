"""Backoff-and-retry wrapper for awaitables that call third-party APIs.

A failing call is retried after ``base_delay * 2**attempt`` seconds (capped
at ``max_delay``). When the raised exception carries a ``retry_after``
attribute, as rate-limit errors from scrape providers do, that hint
replaces the computed delay, still capped at ``max_delay``.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, TypeVar

import structlog

from aigos.metrics import retry_attempts_total, retry_exhausted_total

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Every attempt raised a retryable error; the last one is the cause."""


def backoff_delay(
    attempt: int,
    *,
    base_delay: float,
    max_delay: float,
    jitter: bool,
    hint: float | None = None,
) -> float:
    """Seconds to sleep before attempt number ``attempt + 1``."""
    if hint is not None and hint >= 0:
        return min(hint, max_delay)
    delay = min(base_delay * (2**attempt), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


async def async_with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 2,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    jitter: bool = True,
    retryable: tuple[type[Exception], ...] = (Exception,),
    label: str = "",
) -> T:
    """Await ``fn()`` up to ``max_retries + 1`` times.

    Exceptions outside ``retryable`` propagate on the first occurrence.

    Raises:
        RetryExhaustedError: when the final attempt also fails.
    """
    name = label or getattr(fn, "__name__", "fn")
    attempt = 0
    while True:
        try:
            return await fn()
        except retryable as exc:
            if attempt >= max_retries:
                retry_exhausted_total.labels(fn_name=name).inc()
                raise RetryExhaustedError(
                    f"{name} failed after {attempt + 1} attempts"
                ) from exc
            delay = backoff_delay(
                attempt,
                base_delay=base_delay,
                max_delay=max_delay,
                jitter=jitter,
                hint=getattr(exc, "retry_after", None),
            )
            retry_attempts_total.labels(fn_name=name).inc()
            logger.warning(
                "Retrying after transient failure",
                fn=name,
                attempt=attempt + 1,
                max_retries=max_retries,
                delay_s=round(delay, 2),
                error=str(exc)[:200],
            )
            await asyncio.sleep(delay)
            attempt += 1
