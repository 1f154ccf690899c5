"""Reminder advancer: move a reminder past the occurrence that just fired."""

import logging
from datetime import datetime
from typing import Any, Optional

from ..domain.reminders import ReminderKey
from ..domain.repositories import ReminderRepository
from ..domain.schedules import coerce_frequency
from ..models.reminder import Frequency
from .recurrence import RawSchedule, next_run

logger = logging.getLogger(__name__)


class ReminderAdvancer:
    """Applies the recurrence result to stored reminder state.

    Store failures are logged and swallowed. ``UnsupportedFrequency`` and
    ``InvalidScheduledTime`` from the calculator are programming errors and
    propagate to the caller.
    """

    def __init__(self, reminders: ReminderRepository) -> None:
        self._reminders = reminders

    async def advance(
        self,
        key: ReminderKey,
        frequency: Any,
        schedule: RawSchedule,
        scheduled_for_utc: Optional[datetime],
    ) -> None:
        freq = coerce_frequency(frequency)

        if freq == Frequency.ONE_TIME:
            await self._disable(key, "one-time reminder executed")
            return

        # Always from the due time that fired, never from wall-clock now.
        upcoming = next_run(freq, scheduled_for_utc, schedule)
        if upcoming is None:
            await self._disable(key, "no valid next run")
            return

        try:
            await self._reminders.set_next_run(key.user_id, key.reminder_id, upcoming)
        except Exception as e:
            logger.error(
                "Failed to advance reminder %s/%s: %s",
                key.user_id,
                key.reminder_id,
                e,
                exc_info=True,
            )
            return
        logger.info(
            "Reminder %s/%s next run at %s",
            key.user_id,
            key.reminder_id,
            upcoming.isoformat(),
        )

    async def _disable(self, key: ReminderKey, why: str) -> None:
        try:
            await self._reminders.disable(key.user_id, key.reminder_id)
        except Exception as e:
            logger.error(
                "Failed to disable reminder %s/%s: %s",
                key.user_id,
                key.reminder_id,
                e,
                exc_info=True,
            )
            return
        logger.info("Reminder %s/%s disabled (%s)", key.user_id, key.reminder_id, why)
