import logging
import logging.handlers
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    # Restore any that were removed (and strip any new ones tests may have added)
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture(autouse=True)
def _fresh_defaults():
    """Each test sees freshly loaded YAML defaults."""
    from src.core.defaults_loader import clear_cache

    clear_cache()
    yield
    clear_cache()


@pytest.fixture
async def session_factory():
    """In-memory SQLite database with all tables; yields a session factory."""
    from src.models.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


# ---------------------------------------------------------------------------
# In-memory repository doubles
# ---------------------------------------------------------------------------


class StoreUnavailable(Exception):
    """Raised by the in-memory doubles when ``fail`` is set."""


class _Failing:
    fail = False

    def _maybe_fail(self) -> None:
        if self.fail:
            raise StoreUnavailable("store unavailable")


class InMemoryReminderRepository(_Failing):
    def __init__(self, executions: Optional["InMemoryExecutionRepository"] = None) -> None:
        self.rows: Dict[Tuple[str, str], object] = {}
        self.executions = executions

    def _recorded(self, r) -> bool:
        from src.models.execution import execution_id_for

        if self.executions is None:
            return False
        key = (r.user_id, execution_id_for(r.reminder_id, r.next_run_at_utc))
        return key in self.executions.rows

    def add(self, reminder) -> None:
        self.rows[(reminder.user_id, reminder.reminder_id)] = reminder

    async def get(self, user_id, reminder_id):
        self._maybe_fail()
        return self.rows.get((user_id, reminder_id))

    async def list_due(self, now, limit):
        self._maybe_fail()
        due = [
            r
            for r in self.rows.values()
            if r.enabled
            and r.next_run_at_utc is not None
            and r.next_run_at_utc <= now
            and not self._recorded(r)
        ]
        return sorted(due, key=lambda r: r.next_run_at_utc)[:limit]

    async def set_next_run(self, user_id, reminder_id, next_run_at_utc):
        self._maybe_fail()
        self.rows[(user_id, reminder_id)].next_run_at_utc = next_run_at_utc

    async def disable(self, user_id, reminder_id):
        self._maybe_fail()
        self.rows[(user_id, reminder_id)].enabled = False

    async def initialize(self, user_id, reminder_id, next_run_at_utc):
        self._maybe_fail()
        row = self.rows[(user_id, reminder_id)]
        row.next_run_at_utc = next_run_at_utc
        row.enabled = True

    async def soft_delete(self, user_id, reminder_id, deleted_at):
        self._maybe_fail()
        row = self.rows[(user_id, reminder_id)]
        row.enabled = False
        row.deleted_at = deleted_at


class InMemoryExecutionRepository(_Failing):
    def __init__(self) -> None:
        self.rows: Dict[Tuple[str, str], object] = {}
        self.writes: List[object] = []

    async def exists(self, user_id, execution_id):
        self._maybe_fail()
        return (user_id, execution_id) in self.rows

    async def put(self, record):
        self._maybe_fail()
        if record.created_at is None:
            record.created_at = datetime.now(timezone.utc)
        self.rows[(record.user_id, record.execution_id)] = record
        self.writes.append(record)

    async def list_for_user(self, user_id, limit=50):
        self._maybe_fail()
        mine = [r for (uid, _), r in self.rows.items() if uid == user_id]
        return sorted(mine, key=lambda r: r.created_at, reverse=True)[:limit]

    async def list_user_ids(self):
        self._maybe_fail()
        return sorted({uid for uid, _ in self.rows})

    async def delete_created_before(self, user_id, cutoff, limit):
        self._maybe_fail()
        old = [
            key
            for key, r in self.rows.items()
            if key[0] == user_id and r.created_at < cutoff
        ][:limit]
        for key in old:
            del self.rows[key]
        return len(old)


class InMemoryDraftRepository(_Failing):
    def __init__(self) -> None:
        self.rows: Dict[str, object] = {}
        self._next = 0

    async def add(self, draft):
        self._maybe_fail()
        self._next += 1
        draft.id = f"draft-{self._next}"
        self.rows[draft.id] = draft
        return draft.id


class InMemoryUsageRepository(_Failing):
    def __init__(self) -> None:
        self.user: Dict[Tuple[str, str], int] = {}
        self.global_: Dict[str, int] = {}

    async def get_user_count(self, user_id, date_key):
        self._maybe_fail()
        return self.user.get((user_id, date_key), 0)

    async def get_global_count(self, date_key):
        self._maybe_fail()
        return self.global_.get(date_key, 0)

    async def increment_user(self, user_id, date_key):
        self._maybe_fail()
        self.user[(user_id, date_key)] = self.user.get((user_id, date_key), 0) + 1

    async def increment_global(self, date_key):
        self._maybe_fail()
        self.global_[date_key] = self.global_.get(date_key, 0) + 1


@pytest.fixture
def reminder_repo(execution_repo):
    return InMemoryReminderRepository(execution_repo)


@pytest.fixture
def execution_repo():
    return InMemoryExecutionRepository()


@pytest.fixture
def draft_repo():
    return InMemoryDraftRepository()


@pytest.fixture
def usage_repo():
    return InMemoryUsageRepository()


@pytest.fixture
def make_reminder():
    """Build a ``Reminder`` row with sensible defaults."""
    from src.models.reminder import Reminder

    def _make(
        reminder_id: str = "r1",
        user_id: str = "u1",
        reminder_type: str = "simple",
        frequency: str = "daily",
        enabled: bool = True,
        next_run_at_utc: Optional[datetime] = datetime(2026, 3, 4, 14, 30, tzinfo=timezone.utc),
        schedule: Optional[dict] = None,
        content: Optional[dict] = None,
    ):
        return Reminder(
            user_id=user_id,
            reminder_id=reminder_id,
            reminder_type=reminder_type,
            frequency=frequency,
            enabled=enabled,
            next_run_at_utc=next_run_at_utc,
            schedule=schedule if schedule is not None else {},
            content=content if content is not None else {"message": "Drink water"},
        )

    return _make
