"""DraftRepository protocol: insert-only draft persistence."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DraftRepository(Protocol):
    """Repository interface for Draft persistence.

    Drafts are write-once: there is deliberately no update or delete.
    """

    async def add(self, draft: object) -> str:
        """Persist a new draft.

        Args:
            draft: The Draft object to persist.

        Returns:
            The store-generated draft id.
        """
        ...
