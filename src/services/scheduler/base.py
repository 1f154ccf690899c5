"""
Scheduler base types and abstract interface.

ScheduleType / ScheduledJob define what to run and when.
RuntimeScheduler is the ABC for in-process backends (e.g. AsyncioScheduler).
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Any, Awaitable, Callable, List, Optional


class ScheduleType(enum.Enum):
    INTERVAL = "interval"
    DAILY = "daily"


@dataclass
class ScheduledJob:
    """Describes a job to be scheduled.

    ``callback`` is awaited with no arguments. ``daily_times`` are UTC
    wall-clock times.
    """

    name: str
    callback: Callable[[], Awaitable[Any]]
    schedule_type: ScheduleType
    interval_seconds: Optional[int] = None
    daily_times: List[time] = field(default_factory=list)
    enabled: bool = True
    first_delay_seconds: int = 5

    def __post_init__(self) -> None:
        if self.schedule_type == ScheduleType.INTERVAL and not self.interval_seconds:
            raise ValueError("interval_seconds required for INTERVAL schedule")
        if self.schedule_type == ScheduleType.DAILY and not self.daily_times:
            raise ValueError("daily_times required for DAILY schedule")


def seconds_until_daily(daily_times: List[time], now: datetime) -> float:
    """Seconds from ``now`` to the next UTC occurrence of any of ``daily_times``.

    A time equal to ``now`` counts as already passed and moves to tomorrow.
    """
    now = now.astimezone(timezone.utc)
    candidates = []
    for t in daily_times:
        at = datetime.combine(now.date(), t.replace(tzinfo=None), tzinfo=timezone.utc)
        if at <= now:
            at += timedelta(days=1)
        candidates.append(at)
    return (min(candidates) - now).total_seconds()


class RuntimeScheduler(ABC):
    """ABC for in-process job schedulers."""

    @abstractmethod
    def schedule(self, job: ScheduledJob) -> None:
        """Register a job for execution."""

    @abstractmethod
    def cancel(self, name: str) -> bool:
        """Cancel a scheduled job by name. Returns True if found."""

    @abstractmethod
    def list_jobs(self) -> List[str]:
        """Return names of all registered jobs."""

    @abstractmethod
    async def start(self) -> None:
        """Start running registered jobs."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop the scheduler and cancel all jobs."""
