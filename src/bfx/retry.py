from __future__ import annotations

import logging
import random
import time
from typing import Callable, TypeVar

ResultT = TypeVar("ResultT")

_LOGGER = logging.getLogger("cryptoconnector.bfx.retry")


def backoff_delay(attempt: int, *, base_delay_seconds: float, max_delay_seconds: float) -> float:
    return min(base_delay_seconds * (2 ** (attempt - 1)), max_delay_seconds)


def execute_with_retry(
    operation: Callable[[], ResultT],
    *,
    should_retry: Callable[[Exception], bool],
    attempts: int = 3,
    base_delay_seconds: float = 0.2,
    max_delay_seconds: float = 2.0,
    sleep_fn: Callable[[float], None] = time.sleep,
    rand_fn: Callable[[float, float], float] = random.uniform,
    label: str = "operation",
) -> ResultT:
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as exc:
            if attempt >= attempts or not should_retry(exc):
                raise
            delay = backoff_delay(attempt, base_delay_seconds=base_delay_seconds, max_delay_seconds=max_delay_seconds)
            delay += rand_fn(0.0, 0.1)
            _LOGGER.warning("Retrying %s after failure: attempt=%s delay=%.3fs error=%s", label, attempt, delay, exc)
            sleep_fn(delay)
            attempt += 1
