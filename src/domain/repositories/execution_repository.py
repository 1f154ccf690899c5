"""ExecutionRepository protocol: audit entries keyed by execution identity."""

from datetime import datetime
from typing import List, Protocol, runtime_checkable


@runtime_checkable
class ExecutionRepository(Protocol):
    """Repository interface for ExecutionRecord persistence."""

    async def exists(self, user_id: str, execution_id: str) -> bool:
        """Whether a record exists for this execution identity."""
        ...

    async def put(self, record: object) -> None:
        """Write a record at its identity key (upsert).

        Args:
            record: The ExecutionRecord to write.
        """
        ...

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[object]:
        """Most recent records for a user, newest first."""
        ...

    async def list_user_ids(self) -> List[str]:
        """Distinct users that have at least one record."""
        ...

    async def delete_created_before(self, user_id: str, cutoff: datetime, limit: int) -> int:
        """Delete up to ``limit`` records created before ``cutoff``.

        Returns:
            Number of records deleted.
        """
        ...
