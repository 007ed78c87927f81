"""Rate-governed request scheduler for external data providers.

Each provider client owns one RequestScheduler. Units of work (zero-argument
coroutine functions) are queued in submission order and executed by a single
drain task that enforces:

- a per-window quota (at most ``limit`` executions per 60-second window), and
- a fixed spacing delay after every execution.

Results and exceptions are handed back to the submitter through an
``asyncio.Future``; a failing unit never stops the queue.

Example:
    scheduler = RequestScheduler("openweather", limit=60, request_spacing=0.2)
    payload = await scheduler.submit(lambda: fetch_json("/weather"))
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from nfl_picker.monitoring import ProviderMetrics, get_logger
from nfl_picker.providers.errors import SchedulerStoppedError

log = get_logger()

RequestUnit = Callable[[], Awaitable[Any]]

DEFAULT_WINDOW_SECONDS = 60.0


@dataclass
class RateWindow:
    """Request accounting for the current quota window.

    Attributes:
        window_end: Clock value at which the window resets
        length: Window length in seconds
        count: Requests issued in the current window
    """

    window_end: float
    length: float = DEFAULT_WINDOW_SECONDS
    count: int = 0

    def roll(self, now: float) -> None:
        """Start a fresh window if ``now`` has reached ``window_end``."""
        if now >= self.window_end:
            self.reset(now)

    def reset(self, now: float) -> None:
        self.count = 0
        self.window_end = now + self.length

    def is_exhausted(self, limit: int) -> bool:
        return self.count >= limit


class RequestScheduler:
    """FIFO request queue with a rolling per-minute quota.

    At most one drain task runs per instance. Submissions made while it runs
    are appended to the queue and picked up by the same task. The queue is
    unbounded; callers bound their own submission rate.

    Attributes:
        provider: Provider name used in logs and metrics
        limit: Maximum executions per window
        request_spacing: Seconds to wait after each execution
        window: Current RateWindow
        metrics: Running ProviderMetrics for this provider
    """

    def __init__(
        self,
        provider: str,
        limit: int,
        request_spacing: float,
        window_length: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the scheduler.

        Args:
            provider: Provider name (e.g., "mysportsfeeds")
            limit: Requests allowed per window (must be >= 1)
            request_spacing: Fixed delay after each request, in seconds
            window_length: Quota window length in seconds
            clock: Monotonic clock returning seconds
            sleep: Coroutine function used for every wait

        Raises:
            ValueError: If limit is below 1 or spacing is negative
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        if request_spacing < 0:
            raise ValueError(f"request_spacing must be >= 0, got {request_spacing}")

        self.provider = provider
        self.limit = limit
        self.request_spacing = request_spacing
        self._clock = clock
        self._sleep = sleep
        self.window = RateWindow(window_end=clock() + window_length, length=window_length)
        self.metrics = ProviderMetrics(provider=provider)
        self._pending: deque[tuple[RequestUnit, asyncio.Future]] = deque()
        self._drain_task: asyncio.Task | None = None

    @property
    def pending(self) -> int:
        """Number of queued units not yet started."""
        return len(self._pending)

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    async def submit(self, unit: RequestUnit) -> Any:
        """Queue a unit of work and wait for its outcome.

        Args:
            unit: Zero-argument coroutine function to execute

        Returns:
            Whatever the unit returns

        Raises:
            Exception: Whatever the unit raises, re-raised to this caller only
            SchedulerStoppedError: If the drain task was cancelled before the
                unit could run
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.append((unit, future))

        if not self.is_draining:
            self._drain_task = loop.create_task(self._drain())

        return await future

    async def _drain(self) -> None:
        try:
            while self._pending:
                await self._admit()
                unit, future = self._pending.popleft()
                await self._execute(unit, future)
                await self._sleep(self.request_spacing)
        except asyncio.CancelledError:
            self._fail_pending()
            raise

    async def _admit(self) -> None:
        """Block until the quota allows one more request, then count it."""
        now = self._clock()
        self.window.roll(now)

        if self.window.is_exhausted(self.limit):
            wait_seconds = max(0.0, self.window.window_end - now)
            self.metrics.rate_limit_waits += 1
            log.info(
                "rate_limit_reached",
                provider=self.provider,
                limit=self.limit,
                wait_seconds=round(wait_seconds, 3),
                queued=len(self._pending),
            )
            await self._sleep(wait_seconds)
            self.window.reset(self._clock())

        self.window.count += 1

    async def _execute(self, unit: RequestUnit, future: asyncio.Future) -> None:
        start_time = time.perf_counter()
        self.metrics.requests += 1
        self.metrics.last_request_at = datetime.now(timezone.utc)

        try:
            result = await unit()
        except asyncio.CancelledError:
            if not future.done():
                future.set_exception(
                    SchedulerStoppedError(f"{self.provider} scheduler stopped mid-request")
                )
            raise
        except Exception as exc:
            self.metrics.failures += 1
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self.metrics.total_latency_ms += int((time.perf_counter() - start_time) * 1000)

    def _fail_pending(self) -> None:
        if self._pending:
            log.warning(
                "scheduler_stopped",
                provider=self.provider,
                failed_units=len(self._pending),
            )
        while self._pending:
            _, future = self._pending.popleft()
            if not future.done():
                future.set_exception(
                    SchedulerStoppedError(f"{self.provider} scheduler stopped before request ran")
                )
