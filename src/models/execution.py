"""
Execution record model: one audit entry per reminder occurrence.

The primary key is the execution identity ``<reminder_id>_<scheduledForUTC>``
(scoped by user), never a random id and never the wall-clock run time.
"""

import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, utc_now


class ExecutionStatus(str, enum.Enum):
    """Outcome of one execution attempt."""

    EXECUTED = "executed"
    SKIPPED_DISABLED = "skipped_disabled"
    SKIPPED_CAP = "skipped_cap"
    SKIPPED_ERROR = "skipped_error"


def format_scheduled_for(value: datetime) -> str:
    """Render a due time the way execution identities spell it.

    Millisecond precision, UTC, ``Z`` suffix: ``2026-03-04T14:30:00.000Z``.
    """
    if value.tzinfo is None:
        raise ValueError(f"naive datetime not allowed: {value!r}")
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def execution_id_for(reminder_id: str, scheduled_for: Optional[datetime]) -> str:
    """Deterministic execution identity for a reminder occurrence.

    A reminder that was never scheduled (``scheduled_for is None``) maps to
    the fixed ``<reminder_id>_unscheduled`` identity.
    """
    if scheduled_for is None:
        return f"{reminder_id}_unscheduled"
    return f"{reminder_id}_{format_scheduled_for(scheduled_for)}"


class ExecutionRecord(Base):
    """Immutable audit entry describing what happened to one occurrence."""

    __tablename__ = "executions"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    execution_id: Mapped[str] = mapped_column(String(200), primary_key=True)

    reminder_id: Mapped[str] = mapped_column(String(128), nullable=False)
    reminder_type: Mapped[str] = mapped_column(String(32), nullable=False)
    scheduled_for_utc: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    status: Mapped[ExecutionStatus] = mapped_column(
        Enum(
            ExecutionStatus,
            native_enum=False,
            length=32,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    ai_used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    draft_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_executions_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ExecutionRecord(user_id={self.user_id}, execution_id={self.execution_id}, "
            f"status={self.status}, ai_used={self.ai_used}, draft_id={self.draft_id})>"
        )
