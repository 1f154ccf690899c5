"""SQLAlchemy implementation of UsageRepository."""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.models.ai_usage import AIDailyUsage, AIGlobalDailyUsage

logger = logging.getLogger(__name__)


class SqlAlchemyUsageRepository:
    """Concrete UsageRepository backed by SQLAlchemy async sessions.

    Increments are issued as ``UPDATE ... SET count = count + 1`` so
    concurrent writers never lose updates. The first increment of a day
    inserts the row; if another writer inserted it first, the update is
    retried.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_user_count(self, user_id: str, date_key: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AIDailyUsage.count).where(
                    AIDailyUsage.user_id == user_id,
                    AIDailyUsage.date_key == date_key,
                )
            )
            return result.scalar_one_or_none() or 0

    async def get_global_count(self, date_key: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AIGlobalDailyUsage.count).where(
                    AIGlobalDailyUsage.date_key == date_key
                )
            )
            return result.scalar_one_or_none() or 0

    async def increment_user(self, user_id: str, date_key: str) -> None:
        stmt = (
            update(AIDailyUsage)
            .where(
                AIDailyUsage.user_id == user_id,
                AIDailyUsage.date_key == date_key,
            )
            .values(count=AIDailyUsage.count + 1)
        )
        await self._increment(
            stmt, lambda: AIDailyUsage(user_id=user_id, date_key=date_key, count=1)
        )

    async def increment_global(self, date_key: str) -> None:
        stmt = (
            update(AIGlobalDailyUsage)
            .where(AIGlobalDailyUsage.date_key == date_key)
            .values(count=AIGlobalDailyUsage.count + 1)
        )
        await self._increment(
            stmt, lambda: AIGlobalDailyUsage(date_key=date_key, count=1)
        )

    async def _increment(self, stmt, make_row) -> None:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            if result.rowcount:  # type: ignore[attr-defined]
                await session.commit()
                return

            session.add(make_row())
            try:
                await session.commit()
                return
            except IntegrityError:
                await session.rollback()
                logger.debug("Usage row created concurrently, retrying increment")

            await session.execute(stmt)
            await session.commit()
