"""
Scheduler abstraction for the worker's periodic jobs.

Provides:
- RuntimeScheduler ABC for in-process job execution
- AsyncioScheduler running jobs as asyncio tasks
"""

from .asyncio_backend import AsyncioScheduler
from .base import RuntimeScheduler, ScheduledJob, ScheduleType, seconds_until_daily

__all__ = [
    "AsyncioScheduler",
    "RuntimeScheduler",
    "ScheduledJob",
    "ScheduleType",
    "seconds_until_daily",
]
