"""
Reminder model: a user's standing instruction to produce a draft on a schedule.

Only ``enabled``, ``next_run_at_utc`` and the bookkeeping timestamps are
written by the engine; everything else is owned by whoever created the row.
"""

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UTCDateTime


class ReminderType(str, enum.Enum):
    """How an execution produces its content."""

    SIMPLE = "simple"
    AI = "ai"


class Frequency(str, enum.Enum):
    """Recurrence cadence of a reminder."""

    ONE_TIME = "one_time"
    DAILY = "daily"
    WEEKLY = "weekly"


class Reminder(Base, TimestampMixin):
    """A reminder owned by a user, identified by ``(user_id, reminder_id)``."""

    __tablename__ = "reminders"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    reminder_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Stored as plain strings: rows written by other clients may carry values
    # this engine does not understand, and those must still be loadable.
    reminder_type: Mapped[str] = mapped_column(String(32), nullable=False)
    frequency: Mapped[str] = mapped_column(String(32), nullable=False)

    schedule: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    content: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    next_run_at_utc: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    initialized_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("ix_reminders_enabled_next_run", "enabled", "next_run_at_utc"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reminder(user_id={self.user_id}, reminder_id={self.reminder_id}, "
            f"type={self.reminder_type}, frequency={self.frequency}, "
            f"enabled={self.enabled}, next_run_at_utc={self.next_run_at_utc})>"
        )
