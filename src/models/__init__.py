from .ai_usage import AIDailyUsage, AIGlobalDailyUsage
from .base import Base, TimestampMixin, UTCDateTime
from .draft import Draft
from .execution import ExecutionRecord, ExecutionStatus
from .reminder import Frequency, Reminder, ReminderType

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "Reminder",
    "ReminderType",
    "Frequency",
    "Draft",
    "ExecutionRecord",
    "ExecutionStatus",
    "AIDailyUsage",
    "AIGlobalDailyUsage",
]
