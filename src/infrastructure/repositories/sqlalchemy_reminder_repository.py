"""SQLAlchemy implementation of ReminderRepository."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.models.base import utc_now
from src.models.execution import ExecutionRecord
from src.models.reminder import Reminder

logger = logging.getLogger(__name__)


class SqlAlchemyReminderRepository:
    """Concrete ReminderRepository backed by SQLAlchemy async sessions.

    Each call runs in its own session and commits before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: str, reminder_id: str) -> Optional[Reminder]:
        """Look up a reminder by its identity."""
        async with self._session_factory() as session:
            return await session.get(Reminder, (user_id, reminder_id))

    async def list_due(self, now: datetime, limit: int) -> List[Reminder]:
        """Enabled reminders due at or before ``now``, earliest first.

        Reminders whose current occurrence already has an execution record
        are left out. They were recorded but not advanced, and would
        otherwise fill every batch.
        """
        already_recorded = (
            select(ExecutionRecord.execution_id)
            .where(
                ExecutionRecord.user_id == Reminder.user_id,
                ExecutionRecord.reminder_id == Reminder.reminder_id,
                ExecutionRecord.scheduled_for_utc == Reminder.next_run_at_utc,
            )
            .exists()
        )
        async with self._session_factory() as session:
            result = await session.execute(
                select(Reminder)
                .where(
                    Reminder.enabled.is_(True),
                    Reminder.next_run_at_utc.is_not(None),
                    Reminder.next_run_at_utc <= now,
                    ~already_recorded,
                )
                .order_by(Reminder.next_run_at_utc.asc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def _update(self, user_id: str, reminder_id: str, **values) -> None:
        async with self._session_factory() as session:
            await session.execute(
                update(Reminder)
                .where(
                    Reminder.user_id == user_id,
                    Reminder.reminder_id == reminder_id,
                )
                .values(**values)
            )
            await session.commit()

    async def set_next_run(
        self, user_id: str, reminder_id: str, next_run_at_utc: Optional[datetime]
    ) -> None:
        """Overwrite the next due time."""
        await self._update(user_id, reminder_id, next_run_at_utc=next_run_at_utc)

    async def disable(self, user_id: str, reminder_id: str) -> None:
        """Set ``enabled = false``."""
        await self._update(user_id, reminder_id, enabled=False)

    async def initialize(
        self, user_id: str, reminder_id: str, next_run_at_utc: datetime
    ) -> None:
        """Set the first due time, enable, and stamp ``initialized_at``."""
        await self._update(
            user_id,
            reminder_id,
            next_run_at_utc=next_run_at_utc,
            enabled=True,
            initialized_at=utc_now(),
        )

    async def soft_delete(
        self, user_id: str, reminder_id: str, deleted_at: datetime
    ) -> None:
        """Disable the reminder and stamp ``deleted_at``."""
        await self._update(
            user_id, reminder_id, enabled=False, deleted_at=deleted_at
        )
