"""
Quota guard for AI generation calls.

Two phases: ``check`` before the generation call and ``increment`` only
after it succeeded. The pair is not atomic; concurrent AI executions for
one user can both pass ``check`` and overshoot the cap by a bounded amount.
``increment`` itself is an atomic add in the store.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..domain.reminders import CapCheckResult, CapDenialReason
from ..domain.repositories import UsageRepository
from ..models.ai_usage import date_key_for

logger = logging.getLogger(__name__)

DEFAULT_USER_DAILY_LIMIT = 1
DEFAULT_GLOBAL_DAILY_LIMIT = 100


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuotaGuard:
    """Per-user then global daily caps on generation calls.

    Fails closed: any counter read failure denies with ``global_limit``.
    """

    def __init__(
        self,
        usage: UsageRepository,
        user_limit: int = DEFAULT_USER_DAILY_LIMIT,
        global_limit: int = DEFAULT_GLOBAL_DAILY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._usage = usage
        self.user_limit = user_limit
        self.global_limit = global_limit
        self._clock = clock or _utc_now

    def _date_key(self) -> str:
        return date_key_for(self._clock().astimezone(timezone.utc).date())

    async def check(self, user_id: str) -> CapCheckResult:
        date_key = self._date_key()
        try:
            user_count = await self._usage.get_user_count(user_id, date_key)
            if user_count >= self.user_limit:
                logger.info(
                    "AI cap reached for user %s on %s (%d/%d)",
                    user_id,
                    date_key,
                    user_count,
                    self.user_limit,
                )
                return CapCheckResult.deny(CapDenialReason.USER_LIMIT)

            global_count = await self._usage.get_global_count(date_key)
            if global_count >= self.global_limit:
                logger.warning(
                    "Global AI cap reached on %s (%d/%d)",
                    date_key,
                    global_count,
                    self.global_limit,
                )
                return CapCheckResult.deny(CapDenialReason.GLOBAL_LIMIT)
        except Exception as e:
            logger.error("Quota read failed for user %s, failing closed: %s", user_id, e)
            return CapCheckResult.deny(CapDenialReason.GLOBAL_LIMIT)

        return CapCheckResult.allow()

    async def increment(self, user_id: str) -> None:
        """Count one successful generation against both counters."""
        date_key = self._date_key()
        try:
            await self._usage.increment_user(user_id, date_key)
            await self._usage.increment_global(date_key)
        except Exception as e:
            logger.error(
                "Failed to increment AI usage for user %s on %s: %s",
                user_id,
                date_key,
                e,
                exc_info=True,
            )
