"""PollScheduler: minimum spacing, deferral, rescheduling and stop/start."""

from __future__ import annotations

import asyncio

import pytest

from trade_offer_manager.polling.scheduler import MINIMUM_POLL_INTERVAL, PollScheduler


class CycleCounter:
    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.calls = 0
        self.fail = fail
        self.delay = delay

    async def __call__(self) -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("cycle blew up")


@pytest.fixture
def cycle():
    return CycleCounter()


@pytest.fixture
def scheduler(cycle, clock):
    s = PollScheduler(cycle, poll_interval=5000, clock=clock)
    yield s
    s.stop()


# ── Minimum interval ─────────────────────────────────────────────


async def test_first_trigger_runs_immediately(scheduler, cycle, clock):
    assert await scheduler.trigger() is True
    assert cycle.calls == 1
    assert scheduler.last_poll_time == clock.now


async def test_second_trigger_within_500ms_is_deferred(scheduler, cycle, clock):
    await scheduler.trigger()
    first_poll = scheduler.last_poll_time

    clock.advance(0.5)
    ran = await scheduler.trigger()

    assert ran is False
    assert cycle.calls == 1
    assert scheduler.last_poll_time == first_poll
    assert scheduler.armed
    assert scheduler.pending_delay == pytest.approx(500)


async def test_deferred_cycle_runs_after_remaining_time(scheduler, cycle, clock):
    await scheduler.trigger()
    clock.advance(0.9)
    await scheduler.trigger()
    assert scheduler.pending_delay == pytest.approx(100)

    clock.advance(0.2)
    await asyncio.sleep(0.2)
    await scheduler.wait_idle()

    assert cycle.calls == 2
    assert scheduler.last_poll_time == clock.now


async def test_trigger_after_minimum_interval_runs(scheduler, cycle, clock):
    await scheduler.trigger()
    clock.advance(MINIMUM_POLL_INTERVAL / 1000)
    assert await scheduler.trigger() is True
    assert cycle.calls == 2


# ── Enablement ───────────────────────────────────────────────────


async def test_disabled_scheduler_is_a_noop(cycle, clock):
    s = PollScheduler(cycle, enabled=False, clock=clock)
    s.start()

    assert await s.trigger() is False
    assert cycle.calls == 0
    assert s.last_poll_time is None
    assert not s.armed


# ── Rescheduling ─────────────────────────────────────────────────


async def test_started_scheduler_rearms_after_cycle(scheduler, cycle):
    scheduler.start()
    await asyncio.sleep(0.01)
    await scheduler.wait_idle()

    assert cycle.calls == 1
    assert scheduler.armed
    assert scheduler.pending_delay == 5000


async def test_failed_cycle_still_rearms(clock):
    failing = CycleCounter(fail=True)
    s = PollScheduler(failing, poll_interval=2000, clock=clock)
    s.start()
    await asyncio.sleep(0.01)
    await s.wait_idle()

    assert failing.calls == 1
    assert s.armed
    assert s.pending_delay == 2000
    s.stop()


async def test_interval_below_minimum_is_not_rescheduled(cycle, clock):
    s = PollScheduler(cycle, poll_interval=500, clock=clock)
    s.start()
    await asyncio.sleep(0.01)
    await s.wait_idle()

    assert cycle.calls == 1
    assert not s.armed
    s.stop()


async def test_manual_trigger_without_start_does_not_arm(scheduler):
    await scheduler.trigger()
    assert not scheduler.armed


# ── Stop / start ─────────────────────────────────────────────────


async def test_stop_cancels_pending_timer(scheduler, cycle):
    scheduler.start()
    scheduler.stop()
    await asyncio.sleep(0.01)

    assert cycle.calls == 0
    assert not scheduler.armed


async def test_stop_does_not_interrupt_running_cycle(clock):
    slow = CycleCounter(delay=0.05)
    s = PollScheduler(slow, poll_interval=5000, clock=clock)
    s.start()
    await asyncio.sleep(0.01)
    assert s.polling

    s.stop()
    await s.wait_idle()

    assert slow.calls == 1
    assert not s.polling
    assert not s.armed


async def test_restart_resumes_interval_enforcement(scheduler, cycle, clock):
    scheduler.start()
    await asyncio.sleep(0.01)
    await scheduler.wait_idle()
    scheduler.stop()

    clock.advance(0.3)
    scheduler.start()
    await asyncio.sleep(0.01)
    await scheduler.wait_idle()

    # Restart came 300ms after the last cycle: deferred, not run
    assert cycle.calls == 1
    assert scheduler.pending_delay == pytest.approx(700)


async def test_cycles_never_overlap(clock):
    running = 0
    overlaps = 0

    async def cycle():
        nonlocal running, overlaps
        running += 1
        if running > 1:
            overlaps += 1
        await asyncio.sleep(0.02)
        running -= 1

    s = PollScheduler(cycle, clock=clock)

    async def trigger_later():
        await asyncio.sleep(0.005)
        clock.advance(2)
        await s.trigger()

    await asyncio.gather(s.trigger(), trigger_later())

    assert overlaps == 0


async def test_queued_trigger_keeps_the_regular_timer(clock):
    slow = CycleCounter(delay=0.02)
    s = PollScheduler(slow, poll_interval=5000, clock=clock)
    s.start()
    await asyncio.sleep(0.005)
    assert s.polling

    # Waits on the lock, then finds the 5000ms timer armed by the running cycle
    queued = asyncio.ensure_future(s.trigger())
    await s.wait_idle()

    assert await queued is False
    assert slow.calls == 1
    assert s.armed
    assert s.pending_delay == 5000
    s.stop()
