"""SQLAlchemy implementation of ExecutionRepository."""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.models.execution import ExecutionRecord

logger = logging.getLogger(__name__)


class SqlAlchemyExecutionRepository:
    """Concrete ExecutionRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, user_id: str, execution_id: str) -> bool:
        """Whether any record exists at this identity, whatever its status."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ExecutionRecord.execution_id).where(
                    ExecutionRecord.user_id == user_id,
                    ExecutionRecord.execution_id == execution_id,
                )
            )
            return result.scalar_one_or_none() is not None

    async def put(self, record: ExecutionRecord) -> None:
        """Upsert by primary key; a second write to the same identity overwrites."""
        async with self._session_factory() as session:
            await session.merge(record)
            await session.commit()

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[ExecutionRecord]:
        """Most recent records for a user, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ExecutionRecord)
                .where(ExecutionRecord.user_id == user_id)
                .order_by(ExecutionRecord.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def list_user_ids(self) -> List[str]:
        """Distinct users with at least one record."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ExecutionRecord.user_id).distinct().order_by(ExecutionRecord.user_id)
            )
            return list(result.scalars().all())

    async def delete_created_before(
        self, user_id: str, cutoff: datetime, limit: int
    ) -> int:
        """Delete up to ``limit`` of a user's records created before ``cutoff``."""
        async with self._session_factory() as session:
            ids = (
                await session.execute(
                    select(ExecutionRecord.execution_id)
                    .where(
                        ExecutionRecord.user_id == user_id,
                        ExecutionRecord.created_at < cutoff,
                    )
                    .order_by(ExecutionRecord.created_at.asc())
                    .limit(limit)
                )
            ).scalars().all()
            if not ids:
                return 0

            result = await session.execute(
                delete(ExecutionRecord).where(
                    ExecutionRecord.user_id == user_id,
                    ExecutionRecord.execution_id.in_(list(ids)),
                )
            )
            await session.commit()
            return result.rowcount  # type: ignore[attr-defined]
