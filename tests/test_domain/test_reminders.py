"""Tests for reminder value types and prompt assembly."""

from datetime import datetime, timezone

import pytest

from src.domain.reminders import (
    CapCheckResult,
    CapDenialReason,
    ExecutionEntry,
    ReminderContent,
    ReminderKey,
    ReminderSnapshot,
    build_prompt,
)
from src.models.execution import ExecutionStatus, execution_id_for, format_scheduled_for

DUE = datetime(2026, 3, 4, 14, 30, tzinfo=timezone.utc)


class TestExecutionIdentity:
    def test_format_scheduled_for_millis_z(self):
        assert format_scheduled_for(datetime(2026, 3, 4, 14, 30, 5, 123456, tzinfo=timezone.utc)) == (
            "2026-03-04T14:30:05.123Z"
        )

    def test_format_converts_to_utc(self):
        from zoneinfo import ZoneInfo

        local = datetime(2026, 3, 4, 9, 30, tzinfo=ZoneInfo("America/New_York"))
        assert format_scheduled_for(local) == "2026-03-04T14:30:00.000Z"

    def test_format_rejects_naive(self):
        with pytest.raises(ValueError):
            format_scheduled_for(datetime(2026, 3, 4, 14, 30))

    def test_execution_id(self):
        assert execution_id_for("r1", DUE) == "r1_2026-03-04T14:30:00.000Z"
        assert execution_id_for("r1", None) == "r1_unscheduled"

    def test_entry_execution_id(self):
        entry = ExecutionEntry("u1", "r1", "ai", DUE, ExecutionStatus.SKIPPED_CAP)
        assert entry.execution_id == "r1_2026-03-04T14:30:00.000Z"
        assert entry.ai_used is False
        assert entry.draft_id is None


class TestReminderContent:
    def test_accepts_camel_case_prompt(self):
        content = ReminderContent.from_raw({"aiPrompt": "Write", "tone": "warm", "extra": 1})
        assert content.ai_prompt == "Write"
        assert content.tone == "warm"

    @pytest.mark.parametrize("raw", [None, "text", 42, {"message": ["not", "a", "string"]}])
    def test_unusable_blob_is_empty(self, raw):
        assert ReminderContent.from_raw(raw) == ReminderContent()

    def test_build_prompt_full(self):
        content = ReminderContent(
            aiPrompt="Write a post", role="coach", tone="calm", platform="LinkedIn"
        )
        assert build_prompt(content) == (
            "Write a post\nRole: coach\nTone: calm\nPlatform: LinkedIn"
        )

    def test_build_prompt_skips_missing_fields(self):
        assert build_prompt(ReminderContent(aiPrompt="Hi", platform="X")) == "Hi\nPlatform: X"
        assert build_prompt(ReminderContent()) == ""


class TestReminderSnapshot:
    def test_from_model(self, make_reminder):
        row = make_reminder(
            reminder_type="ai",
            frequency="weekly",
            schedule={"weekDays": [1]},
            content={"aiPrompt": "p"},
        )
        snapshot = ReminderSnapshot.from_model(row)

        assert snapshot.key == ReminderKey("u1", "r1")
        assert snapshot.enabled is True
        assert snapshot.reminder_type == "ai"
        assert snapshot.frequency == "weekly"
        assert snapshot.schedule == {"weekDays": [1]}
        assert snapshot.content.ai_prompt == "p"
        assert snapshot.next_run_at_utc == DUE

    def test_snapshot_is_immutable(self, make_reminder):
        snapshot = ReminderSnapshot.from_model(make_reminder())
        with pytest.raises(Exception):
            snapshot.enabled = False


class TestCapCheckResult:
    def test_allow_and_deny(self):
        assert CapCheckResult.allow() == CapCheckResult(allowed=True, reason=None)
        denied = CapCheckResult.deny(CapDenialReason.USER_LIMIT)
        assert denied.allowed is False
        assert denied.reason.value == "user_limit"
