"""Tests for the scheduler abstraction and the asyncio backend."""

import asyncio
from datetime import datetime, time, timezone
from unittest.mock import AsyncMock

import pytest

from src.services.scheduler import (
    AsyncioScheduler,
    RuntimeScheduler,
    ScheduledJob,
    ScheduleType,
    seconds_until_daily,
)

NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)

# ------------------------------------------------------------------
# ScheduledJob validation
# ------------------------------------------------------------------


def test_interval_job_requires_seconds():
    """INTERVAL job must have interval_seconds."""
    with pytest.raises(ValueError, match="interval_seconds"):
        ScheduledJob(name="test", callback=AsyncMock(), schedule_type=ScheduleType.INTERVAL)


def test_daily_job_requires_times():
    """DAILY job must have daily_times."""
    with pytest.raises(ValueError, match="daily_times"):
        ScheduledJob(name="test", callback=AsyncMock(), schedule_type=ScheduleType.DAILY)


def test_schedule_types_are_interval_and_daily():
    assert {t.value for t in ScheduleType} == {"interval", "daily"}


def test_valid_interval_job_defaults():
    job = ScheduledJob(
        name="scan",
        callback=AsyncMock(),
        schedule_type=ScheduleType.INTERVAL,
        interval_seconds=300,
    )
    assert job.enabled is True
    assert job.first_delay_seconds == 5


# ------------------------------------------------------------------
# seconds_until_daily
# ------------------------------------------------------------------


def test_seconds_until_daily_later_today():
    assert seconds_until_daily([time(15, 0)], NOW) == 3 * 3600


def test_seconds_until_daily_passed_or_equal_moves_to_tomorrow():
    assert seconds_until_daily([time(12, 0)], NOW) == 24 * 3600
    assert seconds_until_daily([time(3, 15)], NOW) == (15 * 60 + 15) * 60


def test_seconds_until_daily_picks_nearest():
    assert seconds_until_daily([time(3, 0), time(13, 0)], NOW) == 3600


# ------------------------------------------------------------------
# AsyncioScheduler
# ------------------------------------------------------------------


class FakeSleep:
    """Records requested delays and lets the loop run without waiting."""

    def __init__(self, stop_after: int):
        self.delays = []
        self.stop_after = stop_after
        self.done = asyncio.Event()

    async def __call__(self, seconds):
        self.delays.append(seconds)
        if len(self.delays) >= self.stop_after:
            self.done.set()
            await asyncio.Event().wait()  # park until cancelled
        await asyncio.sleep(0)


def test_backend_is_runtime_scheduler():
    assert isinstance(AsyncioScheduler(), RuntimeScheduler)


async def test_interval_job_runs_after_first_delay_then_every_interval():
    sleep = FakeSleep(stop_after=4)
    callback = AsyncMock()
    scheduler = AsyncioScheduler(sleep=sleep)
    scheduler.schedule(
        ScheduledJob(
            name="scan",
            callback=callback,
            schedule_type=ScheduleType.INTERVAL,
            interval_seconds=300,
            first_delay_seconds=5,
        )
    )
    await scheduler.start()
    await asyncio.wait_for(sleep.done.wait(), timeout=1)
    await scheduler.stop()

    assert sleep.delays == [5, 300, 300, 300]
    assert callback.await_count == 3


async def test_failing_job_keeps_running():
    sleep = FakeSleep(stop_after=3)
    callback = AsyncMock(side_effect=RuntimeError("boom"))
    scheduler = AsyncioScheduler(sleep=sleep)
    scheduler.schedule(
        ScheduledJob(
            name="flaky",
            callback=callback,
            schedule_type=ScheduleType.INTERVAL,
            interval_seconds=60,
        )
    )
    await scheduler.start()
    await asyncio.wait_for(sleep.done.wait(), timeout=1)
    await scheduler.stop()

    assert callback.await_count == 2


async def test_daily_job_sleeps_until_next_time():
    sleep = FakeSleep(stop_after=2)
    callback = AsyncMock()
    scheduler = AsyncioScheduler(sleep=sleep, clock=lambda: NOW)
    scheduler.schedule(
        ScheduledJob(
            name="cleanup",
            callback=callback,
            schedule_type=ScheduleType.DAILY,
            daily_times=[time(13, 0)],
        )
    )
    await scheduler.start()
    await asyncio.wait_for(sleep.done.wait(), timeout=1)
    await scheduler.stop()

    assert sleep.delays == [3600, 3600]
    assert callback.await_count == 1


async def test_disabled_job_is_not_registered():
    scheduler = AsyncioScheduler()
    scheduler.schedule(
        ScheduledJob(
            name="off",
            callback=AsyncMock(),
            schedule_type=ScheduleType.INTERVAL,
            interval_seconds=10,
            enabled=False,
        )
    )
    assert scheduler.list_jobs() == []


async def test_cancel_and_list_jobs():
    scheduler = AsyncioScheduler()
    job = ScheduledJob(
        name="scan", callback=AsyncMock(), schedule_type=ScheduleType.INTERVAL, interval_seconds=10
    )
    scheduler.schedule(job)
    assert scheduler.list_jobs() == ["scan"]
    assert scheduler.cancel("scan") is True
    assert scheduler.cancel("scan") is False
    assert scheduler.list_jobs() == []


async def test_stop_cancels_running_tasks():
    scheduler = AsyncioScheduler()
    scheduler.schedule(
        ScheduledJob(
            name="scan",
            callback=AsyncMock(),
            schedule_type=ScheduleType.INTERVAL,
            interval_seconds=3600,
            first_delay_seconds=3600,
        )
    )
    await scheduler.start()
    assert scheduler.running is True
    await scheduler.stop()
    assert scheduler.running is False
    assert scheduler.list_jobs() == []
