"""
Execution record retention.

Deletes execution records older than a TTL. Reminders, drafts and usage
counters are never touched.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..domain.repositories import ExecutionRepository

logger = logging.getLogger(__name__)

DEFAULT_TTL_DAYS = 30
DEFAULT_BATCH_SIZE = 500


class ExecutionCleanupService:
    """Best-effort, batched TTL cleanup of execution records."""

    def __init__(
        self, executions: ExecutionRepository, batch_size: int = DEFAULT_BATCH_SIZE
    ) -> None:
        self._executions = executions
        self.batch_size = batch_size

    async def cleanup_expired(
        self, ttl_days: int = DEFAULT_TTL_DAYS, now: Optional[datetime] = None
    ) -> int:
        """Delete records created more than ``ttl_days`` ago.

        Returns:
            Number of records deleted. On a store failure, the count deleted
            before the failure.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=ttl_days)
        deleted = 0

        try:
            for user_id in await self._executions.list_user_ids():
                while True:
                    batch = await self._executions.delete_created_before(
                        user_id, cutoff, self.batch_size
                    )
                    deleted += batch
                    if batch < self.batch_size:
                        break
        except Exception as e:
            logger.error(
                "Execution cleanup failed after deleting %d record(s): %s",
                deleted,
                e,
                exc_info=True,
            )
            return deleted

        if deleted:
            logger.info(
                "Execution cleanup: deleted %d record(s) older than %s",
                deleted,
                cutoff.isoformat(),
            )
        return deleted
