"""Reminder initializer: give a newly created reminder its first due time."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..domain.errors import DomainError
from ..domain.repositories import ReminderRepository
from .recurrence import initial_next_run

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReminderInitializer:
    """Runs once per reminder after it has been created.

    Reminders that already carry a next run time are left alone, so running
    the initializer twice is harmless.
    """

    def __init__(
        self,
        reminders: ReminderRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._reminders = reminders
        self._clock = clock or _utc_now

    async def initialize(self, user_id: str, reminder_id: str) -> Optional[datetime]:
        """Compute and store the first run.

        Returns:
            The first UTC due time, or None when nothing was written.
        """
        reminder = await self._reminders.get(user_id, reminder_id)
        if reminder is None:
            logger.warning("Reminder %s/%s not found, cannot initialize", user_id, reminder_id)
            return None

        if reminder.next_run_at_utc is not None:
            logger.debug("Reminder %s/%s already scheduled", user_id, reminder_id)
            return None

        if not reminder.frequency or not reminder.schedule:
            logger.warning(
                "Reminder %s/%s missing frequency or schedule", user_id, reminder_id
            )
            return None

        try:
            first_run = initial_next_run(reminder.frequency, reminder.schedule, self._clock())
        except DomainError as e:
            logger.warning("Cannot initialize reminder %s/%s: %s", user_id, reminder_id, e)
            return None

        if first_run is None:
            logger.warning(
                "Could not compute first run for reminder %s/%s", user_id, reminder_id
            )
            return None

        await self._reminders.initialize(user_id, reminder_id, first_run)
        logger.info(
            "Reminder %s/%s initialized, first run at %s",
            user_id,
            reminder_id,
            first_run.isoformat(),
        )
        return first_run
