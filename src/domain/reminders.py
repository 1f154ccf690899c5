"""
Reminder-side value types passed between the trigger, the engine and its
collaborators.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models.execution import ExecutionStatus, execution_id_for


class ReminderContent(BaseModel):
    """Static message or AI generation parameters. Never mutated by the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    message: Optional[str] = None
    ai_prompt: Optional[str] = Field(default=None, alias="aiPrompt")
    role: Optional[str] = None
    tone: Optional[str] = None
    platform: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ReminderContent":
        """Lenient parse: unusable blobs become empty content."""
        if isinstance(raw, ReminderContent):
            return raw
        if not isinstance(raw, Mapping):
            return cls()
        try:
            return cls.model_validate(dict(raw))
        except ValidationError:
            return cls()


def build_prompt(content: ReminderContent) -> str:
    """Assemble the generation prompt from an AI reminder's content.

    The prompt itself comes first, followed by one ``Label: value`` line per
    field that is set.
    """
    parts = []
    if content.ai_prompt:
        parts.append(content.ai_prompt)
    if content.role:
        parts.append(f"Role: {content.role}")
    if content.tone:
        parts.append(f"Tone: {content.tone}")
    if content.platform:
        parts.append(f"Platform: {content.platform}")
    return "\n".join(parts)


@dataclass(frozen=True)
class ReminderKey:
    """Reference to a stored reminder."""

    user_id: str
    reminder_id: str


@dataclass(frozen=True)
class ReminderSnapshot:
    """Point-in-time view of a reminder handed to the execution engine.

    ``reminder_type``, ``frequency`` and ``schedule`` are kept as stored so
    that unknown values reach the engine and are reported rather than
    rejected on load.
    """

    user_id: str
    reminder_id: str
    enabled: bool
    reminder_type: str
    frequency: str
    next_run_at_utc: Optional[datetime]
    schedule: Dict[str, Any] = field(default_factory=dict)
    content: ReminderContent = field(default_factory=ReminderContent)

    @property
    def key(self) -> ReminderKey:
        return ReminderKey(self.user_id, self.reminder_id)

    @classmethod
    def from_model(cls, reminder) -> "ReminderSnapshot":
        """Build a snapshot from a ``Reminder`` row."""
        return cls(
            user_id=reminder.user_id,
            reminder_id=reminder.reminder_id,
            enabled=bool(reminder.enabled),
            reminder_type=reminder.reminder_type,
            frequency=reminder.frequency,
            next_run_at_utc=reminder.next_run_at_utc,
            schedule=dict(reminder.schedule or {}),
            content=ReminderContent.from_raw(reminder.content),
        )


@dataclass(frozen=True)
class ExecutionEntry:
    """Input to the execution recorder: the outcome of one attempt."""

    user_id: str
    reminder_id: str
    reminder_type: str
    scheduled_for_utc: Optional[datetime]
    status: ExecutionStatus
    ai_used: bool = False
    draft_id: Optional[str] = None

    @property
    def execution_id(self) -> str:
        return execution_id_for(self.reminder_id, self.scheduled_for_utc)


class CapDenialReason(str, enum.Enum):
    USER_LIMIT = "user_limit"
    GLOBAL_LIMIT = "global_limit"


@dataclass(frozen=True)
class CapCheckResult:
    """Answer from the quota guard's check step."""

    allowed: bool
    reason: Optional[CapDenialReason] = None

    @classmethod
    def allow(cls) -> "CapCheckResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: CapDenialReason) -> "CapCheckResult":
        return cls(allowed=False, reason=reason)
