"""Execution recorder: one audit entry per occurrence."""

import logging

from ..domain.reminders import ExecutionEntry
from ..domain.repositories import ExecutionRepository
from ..models.execution import ExecutionRecord

logger = logging.getLogger(__name__)


class ExecutionRecorder:
    """Writes execution records at their deterministic identity.

    A second write for the same identity overwrites; duplicates are kept out
    by the idempotency guard upstream, not here.
    """

    def __init__(self, executions: ExecutionRepository) -> None:
        self._executions = executions

    async def record(self, entry: ExecutionEntry) -> None:
        """Persist ``entry``. Store failures are logged and swallowed."""
        try:
            record = ExecutionRecord(
                user_id=entry.user_id,
                execution_id=entry.execution_id,
                reminder_id=entry.reminder_id,
                reminder_type=entry.reminder_type,
                scheduled_for_utc=entry.scheduled_for_utc,
                status=entry.status,
                ai_used=entry.ai_used,
                draft_id=entry.draft_id,
            )
            await self._executions.put(record)
        except Exception as e:
            logger.error(
                "Failed to record execution of %s at %s for user %s: %s",
                entry.reminder_id,
                entry.scheduled_for_utc,
                entry.user_id,
                e,
                exc_info=True,
            )
            return

        logger.info(
            "Recorded execution %s status=%s ai_used=%s draft_id=%s",
            record.execution_id,
            entry.status.value,
            entry.ai_used,
            entry.draft_id,
        )
