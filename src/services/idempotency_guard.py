"""Idempotency guard: has this occurrence already been recorded?"""

import logging
from datetime import datetime
from typing import Optional

from ..domain.repositories import ExecutionRepository
from ..models.execution import execution_id_for

logger = logging.getLogger(__name__)


class IdempotencyGuard:
    """Read-only lookup of the execution record for an occurrence.

    ``exists`` fails open: when the store cannot be read the occurrence is
    reported as not yet executed, so delivery proceeds at the risk of a
    duplicate. ``recorded`` reports the unknown case as None for callers
    that must not write on a guess.
    """

    def __init__(self, executions: ExecutionRepository) -> None:
        self._executions = executions

    async def recorded(
        self, user_id: str, reminder_id: str, scheduled_for_utc: Optional[datetime]
    ) -> Optional[bool]:
        """True/False when the store answered, None when it could not be read."""
        try:
            execution_id = execution_id_for(reminder_id, scheduled_for_utc)
            return await self._executions.exists(user_id, execution_id)
        except Exception as e:
            logger.error(
                "Idempotency lookup failed for %s/%s at %s: %s",
                user_id,
                reminder_id,
                scheduled_for_utc,
                e,
            )
            return None

    async def exists(
        self, user_id: str, reminder_id: str, scheduled_for_utc: Optional[datetime]
    ) -> bool:
        found = await self.recorded(user_id, reminder_id, scheduled_for_utc)
        if found is None:
            logger.warning("Failing open for %s/%s", user_id, reminder_id)
            return False
        return found
