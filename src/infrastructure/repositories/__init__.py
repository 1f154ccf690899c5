from .sqlalchemy_draft_repository import SqlAlchemyDraftRepository
from .sqlalchemy_execution_repository import SqlAlchemyExecutionRepository
from .sqlalchemy_reminder_repository import SqlAlchemyReminderRepository
from .sqlalchemy_usage_repository import SqlAlchemyUsageRepository

__all__ = [
    "SqlAlchemyDraftRepository",
    "SqlAlchemyExecutionRepository",
    "SqlAlchemyReminderRepository",
    "SqlAlchemyUsageRepository",
]
