"""Poll scheduler - timer-driven, serialized poll cycles with a minimum spacing."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

log = logging.getLogger(__name__)

MINIMUM_POLL_INTERVAL = 1000  # ms between the starts of two cycles


class PollScheduler:
    """Runs a cycle coroutine on a timer, never more often than once a second.

    The scheduler is Idle (timer armed or not) or Polling (cycle running).
    A trigger, from the timer or from ``trigger()``, starts a cycle only when
    enabled. A trigger that arrives less than MINIMUM_POLL_INTERVAL after the
    previous cycle started is deferred by the remaining time instead of being
    dropped. After each cycle, successful or not, the next one is armed
    ``poll_interval`` ms later, unless that interval is below the minimum.

    Cycles are serialized with a lock, so a slow cycle never overlaps the
    next one.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[None]],
        poll_interval: int = 5000,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cycle = cycle
        self._poll_interval = poll_interval  # ms
        self._enabled = enabled
        self._clock = clock
        self._lock = asyncio.Lock()
        self._running = False
        self._polling = False
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

        self.last_poll_time: float | None = None  # clock() at the start of the last cycle
        self.pending_delay: float | None = None  # ms until the armed timer fires
        self.cycles_run = 0

    # ── State ─────────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def polling(self) -> bool:
        return self._polling

    @property
    def armed(self) -> bool:
        return self._timer is not None

    @property
    def poll_interval(self) -> int:
        return self._poll_interval

    @poll_interval.setter
    def poll_interval(self, value: int) -> None:
        self._poll_interval = value

    # ── Lifecycle ─────────────────────────────────────────

    def start(self) -> None:
        """Begin polling: run a cycle as soon as the loop gets to it."""
        if not self._enabled:
            log.info("Polling disabled (no API key configured)")
            return
        self._running = True
        self._arm(0)
        log.info("Poll scheduler started (interval=%dms)", self._poll_interval)

    def stop(self) -> None:
        """Cancel the pending timer. A cycle already running finishes normally."""
        self._running = False
        self._cancel_timer()
        log.info("Poll scheduler stopped")

    async def wait_idle(self) -> None:
        """Wait for timer-started cycles that are currently running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── Triggering ────────────────────────────────────────

    async def trigger(self) -> bool:
        """Run one cycle now, or defer it if the last one started too recently.

        Returns True if a cycle ran.
        """
        if not self._enabled:
            return False

        async with self._lock:
            now = self._clock()
            if self.last_poll_time is not None:
                elapsed = (now - self.last_poll_time) * 1000
                if elapsed < MINIMUM_POLL_INTERVAL:
                    remaining = MINIMUM_POLL_INTERVAL - elapsed
                    if self._timer_ms() >= remaining:
                        # The regular timer already fires later than the deferral would
                        log.debug("Last poll was %.0fms ago, timer already armed", elapsed)
                        return False
                    log.debug("Last poll was %.0fms ago, deferring %.0fms", elapsed, remaining)
                    self._arm(remaining)
                    return False

            self.last_poll_time = now
            self._cancel_timer()
            self._polling = True
            try:
                await self._cycle()
            except Exception as exc:
                log.error("Poll cycle error: %s", exc, exc_info=True)
            finally:
                self._polling = False
                self.cycles_run += 1

            if self._running:
                self.reset_timer()
            return True

    def reset_timer(self) -> None:
        """Arm the next regular cycle ``poll_interval`` ms from now."""
        if self._poll_interval < MINIMUM_POLL_INTERVAL:
            log.debug(
                "Poll interval %dms is below the %dms minimum, not rescheduling",
                self._poll_interval, MINIMUM_POLL_INTERVAL,
            )
            return
        self._arm(self._poll_interval)

    # ── Timer plumbing ────────────────────────────────────

    def _arm(self, delay_ms: float) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay_ms / 1000, self._fire)
        self.pending_delay = delay_ms

    def _timer_ms(self) -> float:
        """Milliseconds until the armed timer fires, or -1 when none is armed."""
        if self._timer is None:
            return -1
        return (self._timer.when() - asyncio.get_running_loop().time()) * 1000

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.pending_delay = None

    def _fire(self) -> None:
        self._timer = None
        self.pending_delay = None
        task = asyncio.ensure_future(self.trigger())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
