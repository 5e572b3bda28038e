"""Tests for the rate limiter."""

import asyncio
import time

import pytest

from anisync.exceptions import RequestCancelledError, ThrottledError
from anisync.utils.rate_limiter import RateLimiter


def test_rejects_non_positive_concurrency() -> None:
    """At least one call must be admitted at a time."""
    with pytest.raises(ValueError):
        RateLimiter(max_concurrent=0)


@pytest.mark.asyncio
async def test_bounds_concurrent_calls() -> None:
    """No more than max_concurrent calls run at the same time."""
    limiter = RateLimiter(max_concurrent=2, min_time=0)
    in_flight = 0
    peak = 0

    async def call() -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return 1

    results = await asyncio.gather(*(limiter.submit(call) for _ in range(6)))

    assert results == [1] * 6
    assert peak == 2


@pytest.mark.asyncio
async def test_spaces_call_starts() -> None:
    """Call starts are spaced by at least min_time."""
    limiter = RateLimiter(max_concurrent=10, min_time=0.05)
    starts: list[float] = []

    async def call() -> None:
        starts.append(time.monotonic())

    await asyncio.gather(*(limiter.submit(call) for _ in range(3)))

    assert len(starts) == 3
    # Two refills of the single-token bucket are needed for three starts
    assert starts[-1] - starts[0] >= 0.08


@pytest.mark.asyncio
async def test_retries_throttled_calls_until_success() -> None:
    """A throttled call is resubmitted until it completes."""
    limiter = RateLimiter(max_concurrent=1, min_time=0)
    attempts = 0

    async def call() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 4:
            raise ThrottledError(status=429)
        return "done"

    assert await limiter.submit(call) == "done"
    assert attempts == 4


@pytest.mark.asyncio
async def test_other_errors_are_not_retried() -> None:
    """Errors other than throttling propagate after a single attempt."""
    limiter = RateLimiter(max_concurrent=1, min_time=0)
    attempts = 0

    async def call() -> None:
        nonlocal attempts
        attempts += 1
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await limiter.submit(call)
    assert attempts == 1


@pytest.mark.asyncio
async def test_cancel_event_stops_retry_loop() -> None:
    """Setting the cancel event bounds the otherwise unlimited retries."""
    limiter = RateLimiter(max_concurrent=1, min_time=0)
    cancel = asyncio.Event()
    attempts = 0

    async def call() -> None:
        nonlocal attempts
        attempts += 1
        if attempts == 2:
            cancel.set()
        raise ThrottledError(status=429)

    with pytest.raises(RequestCancelledError):
        await limiter.submit(call, cancel=cancel)
    assert attempts == 2


@pytest.mark.asyncio
async def test_already_cancelled_never_calls() -> None:
    """A pre-set cancel event prevents any attempt."""
    limiter = RateLimiter(min_time=0)
    cancel = asyncio.Event()
    cancel.set()

    async def call() -> None:
        raise AssertionError("should not run")

    with pytest.raises(RequestCancelledError):
        await limiter.submit(call, cancel=cancel)


@pytest.mark.asyncio
async def test_slot_is_released_after_throttle() -> None:
    """A throttled attempt frees its slot so other calls can proceed."""
    limiter = RateLimiter(max_concurrent=1, min_time=0)
    order: list[str] = []
    throttled_once = False

    async def flaky() -> None:
        nonlocal throttled_once
        order.append("flaky")
        if not throttled_once:
            throttled_once = True
            await asyncio.sleep(0)
            raise ThrottledError(status=429)

    async def steady() -> None:
        order.append("steady")

    await asyncio.gather(limiter.submit(flaky), limiter.submit(steady))

    assert order.count("flaky") == 2
    assert order.count("steady") == 1
