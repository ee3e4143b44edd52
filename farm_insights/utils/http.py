"""HTTP utilities providing retry/backoff semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 1.0) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds

    @classmethod
    def from_milliseconds(cls, *, attempts: int, delay_ms: int) -> "RetryConfig":
        return cls(attempts=attempts, backoff_seconds=delay_ms / 1000.0)


async def call_with_retry(
    func: Callable[..., Awaitable[T]],
    *args,
    retry_config: RetryConfig | None = None,
    should_retry: Callable[[Exception], bool] | None = None,
    **kwargs,
) -> T:
    """Await ``func`` until it succeeds or the attempts are exhausted.

    Exceptions rejected by ``should_retry`` propagate immediately. The delay
    grows linearly with the attempt number.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            if should_retry is not None and not should_retry(exc):
                raise
            attempt += 1
            if attempt >= config.attempts:
                raise
            logger.warning(
                "Attempt %d/%d failed (%s); retrying.",
                attempt,
                config.attempts,
                exc,
            )
            await asyncio.sleep(config.backoff_seconds * attempt)


__all__ = ["RetryConfig", "call_with_retry"]
