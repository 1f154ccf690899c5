"""Reminder tools: soft delete and execution inspection."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..domain.errors import ReminderNotFound
from ..domain.repositories import ExecutionRepository, ReminderRepository
from ..models.execution import ExecutionRecord

logger = logging.getLogger(__name__)

DELETED = "deleted"
ALREADY_DELETED = "already_deleted"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReminderToolsService:
    def __init__(
        self,
        reminders: ReminderRepository,
        executions: ExecutionRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._reminders = reminders
        self._executions = executions
        self._clock = clock or _utc_now

    async def soft_delete(self, user_id: str, reminder_id: str) -> str:
        """Disable a reminder and mark it deleted. Idempotent.

        Returns:
            ``"deleted"``, or ``"already_deleted"`` if it was deleted before.

        Raises:
            ReminderNotFound: no such reminder.
        """
        reminder = await self._reminders.get(user_id, reminder_id)
        if reminder is None:
            raise ReminderNotFound(user_id, reminder_id)

        if reminder.deleted_at is not None:
            return ALREADY_DELETED

        await self._reminders.soft_delete(user_id, reminder_id, self._clock())
        logger.info("Reminder %s/%s soft-deleted", user_id, reminder_id)
        return DELETED

    async def inspect_executions(self, user_id: str, limit: int = 20) -> List[ExecutionRecord]:
        """Most recent execution records for a user, newest first."""
        return await self._executions.list_for_user(user_id, limit)
