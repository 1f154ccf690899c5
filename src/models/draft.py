import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, utc_now


def new_draft_id() -> str:
    return uuid.uuid4().hex


class Draft(Base):
    """Write-once content artifact produced by one execution."""

    __tablename__ = "drafts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_draft_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    reminder_id: Mapped[str] = mapped_column(String(128), nullable=False)
    reminder_type: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scheduled_for_utc: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, nullable=False)

    __table_args__ = (Index("ix_drafts_user_reminder", "user_id", "reminder_id"),)

    def __repr__(self) -> str:
        return (
            f"<Draft(id={self.id}, user_id={self.user_id}, "
            f"reminder_id={self.reminder_id}, type={self.reminder_type})>"
        )
