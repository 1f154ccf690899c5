"""SQLAlchemy implementation of DraftRepository."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.models.draft import Draft, new_draft_id

logger = logging.getLogger(__name__)


class SqlAlchemyDraftRepository:
    """Concrete DraftRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, draft: Draft) -> str:
        """Insert a new draft and return its generated id."""
        if not draft.id:
            draft.id = new_draft_id()
        async with self._session_factory() as session:
            session.add(draft)
            await session.commit()
        return draft.id
