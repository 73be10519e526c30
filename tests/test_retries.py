from __future__ import annotations

import pytest

from websight.shared.retries import AsyncRetriesService, RetryPolicy


class _Sleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class _Missing(Exception):
    pass


@pytest.mark.asyncio
async def test_run_retries_until_success_with_backoff() -> None:
    sleep = _Sleep()
    service = AsyncRetriesService(sleep=sleep)
    attempts: list[int] = []

    async def _operation(attempt: int) -> str:
        attempts.append(attempt)
        if attempt < 3:
            raise _Missing()
        return "ok"

    policy = RetryPolicy(max_attempts=4, base_delay_seconds=0.5, max_delay_seconds=0.75)
    result = await service.run(_operation, policy=policy)

    assert result == "ok"
    assert attempts == [1, 2, 3]
    assert sleep.delays == [0.5, 0.75]


@pytest.mark.asyncio
async def test_fixed_policy_reraises_after_last_attempt() -> None:
    sleep = _Sleep()
    retried: list[int] = []

    async def _operation(attempt: int) -> None:
        raise _Missing(f"attempt {attempt}")

    policy = RetryPolicy.fixed(max_attempts=3, delay_seconds=1.0, retry_exceptions=(_Missing,))
    with pytest.raises(_Missing, match="attempt 3"):
        await AsyncRetriesService(sleep=sleep).run(
            _operation,
            policy=policy,
            on_retry=lambda _exc, attempt, _delay: retried.append(attempt),
        )

    assert sleep.delays == [1.0, 1.0]
    assert retried == [1, 2]


@pytest.mark.asyncio
async def test_non_retryable_error_propagates_immediately() -> None:
    sleep = _Sleep()
    calls: list[int] = []

    async def _operation(attempt: int) -> None:
        calls.append(attempt)
        raise KeyError("hidden")

    policy = RetryPolicy.fixed(max_attempts=3, delay_seconds=1.0, retry_exceptions=(_Missing,))
    with pytest.raises(KeyError):
        await AsyncRetriesService(sleep=sleep).run(_operation, policy=policy)

    assert calls == [1]
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_invalid_policy_is_rejected() -> None:
    async def _operation(attempt: int) -> None:
        del attempt

    with pytest.raises(ValueError, match="max_attempts must be >= 1"):
        await AsyncRetriesService().run(_operation, policy=RetryPolicy.fixed(max_attempts=0, delay_seconds=1.0))
