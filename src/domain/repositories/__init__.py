from .draft_repository import DraftRepository
from .execution_repository import ExecutionRepository
from .reminder_repository import ReminderRepository
from .usage_repository import UsageRepository

__all__ = [
    "DraftRepository",
    "ExecutionRepository",
    "ReminderRepository",
    "UsageRepository",
]
