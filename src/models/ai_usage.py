"""
Daily AI usage counters.

One row per user per UTC calendar day and one system-wide row per day.
``count`` is only ever changed with an in-database ``count + 1``.
"""

from datetime import date

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


def date_key_for(day: date) -> str:
    """``YYYY-MM-DD`` key for a UTC calendar day."""
    return day.isoformat()


class AIDailyUsage(Base, TimestampMixin):
    __tablename__ = "ai_daily_usage"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    date_key: Mapped[str] = mapped_column(String(10), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class AIGlobalDailyUsage(Base, TimestampMixin):
    __tablename__ = "ai_global_daily_usage"

    date_key: Mapped[str] = mapped_column(String(10), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
