"""ReminderRepository protocol: reminder lookup and engine-owned mutations."""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ReminderRepository(Protocol):
    """Repository interface for Reminder access.

    Only ``enabled``, ``next_run_at_utc`` and bookkeeping timestamps may be
    written through this interface; reminder content is never touched.
    """

    async def get(self, user_id: str, reminder_id: str) -> Optional[object]:
        """Look up a reminder by its identity.

        Returns:
            The Reminder object, or None if not found.
        """
        ...

    async def list_due(self, now: datetime, limit: int) -> List[object]:
        """Enabled reminders with ``next_run_at_utc <= now``, earliest first.

        Reminders whose current occurrence already has an execution record
        are excluded.

        Args:
            now: Timezone-aware cut-off.
            limit: Maximum number of reminders to return.
        """
        ...

    async def set_next_run(self, user_id: str, reminder_id: str, next_run_at_utc: Optional[datetime]) -> None:
        """Overwrite the next due time."""
        ...

    async def disable(self, user_id: str, reminder_id: str) -> None:
        """Set ``enabled = false``."""
        ...

    async def initialize(self, user_id: str, reminder_id: str, next_run_at_utc: datetime) -> None:
        """Set the first due time and enable the reminder."""
        ...

    async def soft_delete(self, user_id: str, reminder_id: str, deleted_at: datetime) -> None:
        """Disable the reminder and stamp ``deleted_at``."""
        ...
