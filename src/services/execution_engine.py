"""
Execution engine: runs one reminder occurrence.

Per invocation the steps are strictly sequential, each deciding whether the
next one runs:

    disabled?            -> record skipped_disabled if known unrecorded, stop
    already executed?    -> stop silently
    type simple          -> draft, record executed, advance
    type ai              -> cap check
        denied           -> record skipped_cap, advance
        generate
            failed       -> record skipped_error, advance (no retry)
            ok           -> count usage, draft, record executed(ai), advance
    anything else        -> record skipped_error, stop

The due time used everywhere is the reminder's ``next_run_at_utc`` (the
time it was supposed to run), never the wall clock.
"""

import logging
from typing import Optional

from ..domain.interfaces import ContentGenerator
from ..domain.reminders import ExecutionEntry, ReminderSnapshot, build_prompt
from ..models.execution import ExecutionStatus
from ..models.reminder import ReminderType
from ..utils.logging import ExecutionLogContext
from .draft_writer import DraftWriter
from .execution_recorder import ExecutionRecorder
from .idempotency_guard import IdempotencyGuard
from .quota_guard import QuotaGuard
from .reminder_advancer import ReminderAdvancer

logger = logging.getLogger(__name__)


class ExecutionEngine:
    """Orchestrates guards, writers and the advancer for one reminder.

    ``execute`` never raises: anything escaping the state machine is logged
    and the invocation becomes a no-op from the trigger's point of view.
    """

    def __init__(
        self,
        idempotency: IdempotencyGuard,
        quota: QuotaGuard,
        drafts: DraftWriter,
        recorder: ExecutionRecorder,
        advancer: ReminderAdvancer,
        generator: ContentGenerator,
    ) -> None:
        self.idempotency = idempotency
        self.quota = quota
        self.drafts = drafts
        self.recorder = recorder
        self.advancer = advancer
        self.generator = generator

    async def execute(self, reminder: ReminderSnapshot) -> None:
        try:
            with ExecutionLogContext(
                reminder.user_id, reminder.reminder_id, reminder.next_run_at_utc
            ):
                await self._run(reminder)
        except Exception as e:
            logger.error(
                "Execution of reminder %s/%s aborted: %s",
                reminder.user_id,
                reminder.reminder_id,
                e,
            )

    async def _run(self, reminder: ReminderSnapshot) -> None:
        scheduled_for = reminder.next_run_at_utc

        if not reminder.enabled:
            logger.info(
                "Reminder %s/%s is disabled, skipping",
                reminder.user_id,
                reminder.reminder_id,
            )
            # Never overwrite the record of an occurrence that already ran,
            # and do not guess when the store cannot say.
            recorded = await self.idempotency.recorded(
                reminder.user_id, reminder.reminder_id, scheduled_for
            )
            if recorded is None:
                logger.warning(
                    "Not recording skip for disabled reminder %s/%s: lookup failed",
                    reminder.user_id,
                    reminder.reminder_id,
                )
            elif not recorded:
                await self._record(reminder, ExecutionStatus.SKIPPED_DISABLED)
            return

        if scheduled_for is None:
            logger.warning(
                "Reminder %s/%s is enabled but has no next run, nothing to execute",
                reminder.user_id,
                reminder.reminder_id,
            )
            return

        if await self.idempotency.exists(
            reminder.user_id, reminder.reminder_id, scheduled_for
        ):
            logger.info(
                "Reminder %s/%s already executed for %s",
                reminder.user_id,
                reminder.reminder_id,
                scheduled_for.isoformat(),
            )
            return

        try:
            reminder_type = ReminderType(reminder.reminder_type)
        except ValueError:
            logger.error(
                "Reminder %s/%s has unknown type %r",
                reminder.user_id,
                reminder.reminder_id,
                reminder.reminder_type,
            )
            await self._record(reminder, ExecutionStatus.SKIPPED_ERROR)
            return

        if reminder_type == ReminderType.SIMPLE:
            await self._run_simple(reminder)
        else:
            await self._run_ai(reminder)

    async def _run_simple(self, reminder: ReminderSnapshot) -> None:
        draft_id = await self._write_draft(reminder, reminder.content.message or "")
        await self._record(reminder, ExecutionStatus.EXECUTED, draft_id=draft_id)
        await self._advance(reminder)

    async def _run_ai(self, reminder: ReminderSnapshot) -> None:
        cap = await self.quota.check(reminder.user_id)
        if not cap.allowed:
            logger.info(
                "AI generation for %s/%s denied: %s",
                reminder.user_id,
                reminder.reminder_id,
                cap.reason.value if cap.reason else "unknown",
            )
            await self._record(reminder, ExecutionStatus.SKIPPED_CAP)
            await self._advance(reminder)
            return

        try:
            text = await self.generator.generate(build_prompt(reminder.content))
        except Exception as e:
            logger.error(
                "Generation failed for %s/%s: %s",
                reminder.user_id,
                reminder.reminder_id,
                e,
            )
            await self._record(reminder, ExecutionStatus.SKIPPED_ERROR)
            await self._advance(reminder)
            return

        # Only successful calls are counted.
        await self.quota.increment(reminder.user_id)
        draft_id = await self._write_draft(reminder, text)
        await self._record(
            reminder, ExecutionStatus.EXECUTED, ai_used=True, draft_id=draft_id
        )
        await self._advance(reminder)

    async def _write_draft(self, reminder: ReminderSnapshot, content: str) -> Optional[str]:
        return await self.drafts.create(
            reminder.user_id,
            reminder.reminder_id,
            reminder.reminder_type,
            content,
            reminder.next_run_at_utc,
        )

    async def _record(
        self,
        reminder: ReminderSnapshot,
        status: ExecutionStatus,
        ai_used: bool = False,
        draft_id: Optional[str] = None,
    ) -> None:
        await self.recorder.record(
            ExecutionEntry(
                user_id=reminder.user_id,
                reminder_id=reminder.reminder_id,
                reminder_type=reminder.reminder_type,
                scheduled_for_utc=reminder.next_run_at_utc,
                status=status,
                ai_used=ai_used,
                draft_id=draft_id,
            )
        )

    async def _advance(self, reminder: ReminderSnapshot) -> None:
        await self.advancer.advance(
            reminder.key,
            reminder.frequency,
            reminder.schedule,
            reminder.next_run_at_utc,
        )
