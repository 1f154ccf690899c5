"""
AsyncioScheduler: RuntimeScheduler running each job in its own asyncio task.

INTERVAL jobs wait ``first_delay_seconds`` and then run every
``interval_seconds``; DAILY jobs run at each UTC ``daily_times`` entry.
A run that raises is logged and the job keeps its cadence.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from .base import RuntimeScheduler, ScheduledJob, ScheduleType, seconds_until_daily

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AsyncioScheduler(RuntimeScheduler):
    """In-process scheduler backed by asyncio tasks."""

    def __init__(
        self,
        sleep: Optional[Sleep] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or _utc_now
        self._jobs: Dict[str, ScheduledJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def schedule(self, job: ScheduledJob) -> None:
        if not job.enabled:
            logger.info("Job '%s' is disabled, skipping", job.name)
            return
        if job.name in self._jobs:
            self.cancel(job.name)

        self._jobs[job.name] = job
        if self._running:
            self._spawn(job)

        if job.schedule_type == ScheduleType.INTERVAL:
            logger.info(
                "Scheduled interval job '%s' every %ds (first after %ds)",
                job.name,
                job.interval_seconds,
                job.first_delay_seconds,
            )
        else:
            logger.info(
                "Scheduled daily job '%s' at %s UTC",
                job.name,
                ", ".join(t.strftime("%H:%M") for t in job.daily_times),
            )

    def cancel(self, name: str) -> bool:
        if name not in self._jobs:
            return False
        del self._jobs[name]
        task = self._tasks.pop(name, None)
        if task is not None and not task.done():
            task.cancel()
        logger.info("Cancelled job '%s'", name)
        return True

    def list_jobs(self) -> List[str]:
        return list(self._jobs.keys())

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        for job in self._jobs.values():
            self._spawn(job)
        logger.info("Scheduler started with %d job(s)", len(self._jobs))

    async def stop(self) -> None:
        self._running = False
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._jobs.clear()
        logger.info("All scheduled jobs cancelled")

    async def wait(self) -> None:
        """Block until every job task has finished (or the caller is cancelled)."""
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    def _spawn(self, job: ScheduledJob) -> None:
        self._tasks[job.name] = asyncio.create_task(
            self._run_job(job), name=f"job:{job.name}"
        )

    async def _run_job(self, job: ScheduledJob) -> None:
        if job.schedule_type == ScheduleType.INTERVAL:
            await self._sleep(job.first_delay_seconds)
            while True:
                await self._invoke(job)
                await self._sleep(job.interval_seconds)

        else:
            while True:
                await self._sleep(seconds_until_daily(job.daily_times, self._clock()))
                await self._invoke(job)

    async def _invoke(self, job: ScheduledJob) -> None:
        try:
            await job.callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Job '%s' failed: %s", job.name, e, exc_info=True)
