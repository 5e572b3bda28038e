"""Process-wide admission control for outbound AniList requests."""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import nullcontext
from typing import TypeVar

from limiter import Limiter

from anisync import log
from anisync.exceptions import RequestCancelledError, ThrottledError

__all__ = ["RateLimiter"]

T = TypeVar("T")


class RateLimiter:
    """Rate limiter gating every outbound call of the process.

    At most ``max_concurrent`` calls may be in flight at once and call starts
    are spaced at least ``min_time`` seconds apart. The spacing is a token
    bucket holding a single token that refills every ``min_time`` seconds.

    A call that raises ``ThrottledError`` is resubmitted through the same
    gates with the same arguments, with no cap on the number of attempts. The
    limiter's own spacing is the only backoff. Pass a cancellation event to
    ``submit`` to bound the loop from the outside.
    """

    def __init__(
        self, max_concurrent: int = 100, min_time: float = 0.6, name: str = "AniList"
    ) -> None:
        """Initialize the rate limiter.

        Args:
            max_concurrent (int): Maximum number of calls in flight at once.
            min_time (float): Minimum seconds between two call starts. Zero or
                less disables the spacing.
            name (str): Name used to prefix log messages.
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.name = name
        self.max_concurrent = max_concurrent
        self.min_time = min_time

        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._pacer = (
            Limiter(rate=1 / min_time, capacity=1, consume=1, jitter=False)
            if min_time > 0
            else None
        )

    async def submit(
        self,
        call: Callable[[], Awaitable[T]],
        cancel: asyncio.Event | None = None,
    ) -> T:
        """Run ``call`` once admitted, retrying it whenever it is throttled.

        Args:
            call (Callable[[], Awaitable[T]]): Zero-argument coroutine factory
                performing the request. It is invoked again for every retry.
            cancel (asyncio.Event | None): Optional event that stops the retry
                loop once set.

        Returns:
            T: Whatever the successful attempt returned.

        Raises:
            RequestCancelledError: If ``cancel`` was set before an attempt.
            Exception: Any non-throttle error raised by ``call``.
        """
        attempt = 0
        while True:
            if cancel is not None and cancel.is_set():
                raise RequestCancelledError(
                    f"Request cancelled after {attempt} throttled attempt(s)"
                )
            attempt += 1

            pacer = self._pacer if self._pacer is not None else nullcontext()
            async with self._semaphore:
                async with pacer:
                    log.debug(
                        f"Starting {self.name} request $${{attempt: {attempt}}}$$"
                    )
                try:
                    return await call()
                except ThrottledError:
                    log.warning(
                        f"{self.name} rate limit exceeded, resubmitting request "
                        f"$${{attempt: {attempt}}}$$"
                    )
