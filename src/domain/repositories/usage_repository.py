"""UsageRepository protocol: daily AI usage counters."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class UsageRepository(Protocol):
    """Repository interface for per-user and global daily counters.

    Missing counters read as 0. Increments must be atomic adds in the store,
    never read-modify-write.
    """

    async def get_user_count(self, user_id: str, date_key: str) -> int:
        ...

    async def get_global_count(self, date_key: str) -> int:
        ...

    async def increment_user(self, user_id: str, date_key: str) -> None:
        ...

    async def increment_global(self, date_key: str) -> None:
        ...
