"""
Scheduler trigger: find due reminders and hand each to the execution engine.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from ..domain.reminders import ReminderSnapshot
from ..domain.repositories import ReminderRepository
from .execution_engine import ExecutionEngine

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


@dataclass(frozen=True)
class SchedulerRunResult:
    total: int
    succeeded: int
    failed: int
    duration_seconds: float


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReminderScheduler:
    """One scan of the reminder store per ``run_once`` call.

    Due reminders are processed one after another; a failure on one never
    stops the batch. A failure of the due-reminder query itself propagates
    so the hosting scheduler can log it and try again on its next tick.
    """

    def __init__(
        self,
        reminders: ReminderRepository,
        engine: ExecutionEngine,
        batch_size: int = DEFAULT_BATCH_SIZE,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._reminders = reminders
        self._engine = engine
        self.batch_size = batch_size
        self._clock = clock or _utc_now

    async def run_once(self, now: Optional[datetime] = None) -> SchedulerRunResult:
        started = time.monotonic()
        now = now or self._clock()

        due = await self._reminders.list_due(now, self.batch_size)
        if not due:
            logger.debug("No due reminders at %s", now.isoformat())
            return SchedulerRunResult(0, 0, 0, time.monotonic() - started)

        logger.info("Processing %d due reminder(s)", len(due))
        succeeded = failed = 0
        for reminder in due:
            try:
                await self._engine.execute(ReminderSnapshot.from_model(reminder))
                succeeded += 1
            except Exception as e:
                failed += 1
                logger.error(
                    "Unexpected error processing reminder %s/%s: %s",
                    getattr(reminder, "user_id", "?"),
                    getattr(reminder, "reminder_id", "?"),
                    e,
                    exc_info=True,
                )

        result = SchedulerRunResult(
            total=len(due),
            succeeded=succeeded,
            failed=failed,
            duration_seconds=time.monotonic() - started,
        )
        logger.info(
            "Scheduler run complete: %d total, %d succeeded, %d failed in %.2fs",
            result.total,
            result.succeeded,
            result.failed,
            result.duration_seconds,
        )
        return result
