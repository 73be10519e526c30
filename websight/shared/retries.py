from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int
    base_delay_seconds: float
    max_delay_seconds: float
    backoff_factor: float = 2.0
    retry_exceptions: tuple[type[Exception], ...] = (Exception,)

    @classmethod
    def fixed(
        cls,
        *,
        max_attempts: int,
        delay_seconds: float,
        retry_exceptions: tuple[type[Exception], ...] = (Exception,),
    ) -> RetryPolicy:
        return cls(
            max_attempts=max_attempts,
            base_delay_seconds=delay_seconds,
            max_delay_seconds=delay_seconds,
            backoff_factor=1.0,
            retry_exceptions=retry_exceptions,
        )


class AsyncRetriesService:
    def __init__(self, sleep: Callable[[float], Awaitable[None]] | None = None) -> None:
        self._sleep = sleep or asyncio.sleep

    async def run(
        self,
        operation: Callable[[int], Awaitable[T]],
        *,
        policy: RetryPolicy,
        on_retry: Callable[[Exception, int, float], None] | None = None,
    ) -> T:
        """Run ``operation(attempt)`` until it returns or stops raising a retryable error.

        Exceptions outside ``policy.retry_exceptions`` propagate at once, without
        consuming the remaining attempts.
        """
        if policy.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if policy.base_delay_seconds <= 0:
            raise ValueError("base_delay_seconds must be > 0")
        if policy.max_delay_seconds <= 0:
            raise ValueError("max_delay_seconds must be > 0")
        if policy.backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await operation(attempt)
            except policy.retry_exceptions as exc:
                if attempt >= policy.max_attempts:
                    raise
                delay = self._delay_for_attempt(policy=policy, attempt=attempt)
                if on_retry is not None:
                    on_retry(exc, attempt, delay)
                await self._sleep(delay)
        raise AssertionError("unreachable")

    @staticmethod
    def _delay_for_attempt(*, policy: RetryPolicy, attempt: int) -> float:
        return min(policy.max_delay_seconds, policy.base_delay_seconds * (policy.backoff_factor ** (attempt - 1)))
