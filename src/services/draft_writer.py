"""Draft writer: best-effort, write-once persistence of execution output."""

import logging
from datetime import datetime
from typing import Optional

from ..domain.repositories import DraftRepository
from ..models.draft import Draft

logger = logging.getLogger(__name__)


class DraftWriter:
    """Creates drafts. There is no update or delete."""

    def __init__(self, drafts: DraftRepository) -> None:
        self._drafts = drafts

    async def create(
        self,
        user_id: str,
        reminder_id: str,
        reminder_type: str,
        content: str,
        scheduled_for_utc: Optional[datetime],
    ) -> Optional[str]:
        """Persist a draft.

        Returns:
            The draft id, or None if the write failed. Never raises.
        """
        draft = Draft(
            user_id=user_id,
            reminder_id=reminder_id,
            reminder_type=reminder_type,
            content=content,
            scheduled_for_utc=scheduled_for_utc,
        )
        try:
            draft_id = await self._drafts.add(draft)
        except Exception as e:
            logger.error(
                "Failed to write draft for %s/%s: %s", user_id, reminder_id, e, exc_info=True
            )
            return None

        logger.info("Draft %s created for %s/%s", draft_id, user_id, reminder_id)
        return draft_id
