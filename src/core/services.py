"""
Service Registry - wires the reminder engine and its collaborators.

This is the only place that reads tunables from ``defaults_loader`` and
``Settings``; every component receives its limits and collaborators through
its constructor.

Usage:
    from src.core.services import setup_services, get_service

    setup_services(session_factory)
    scheduler = get_service(Services.REMINDER_SCHEDULER)
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .container import ServiceContainer, get_container, reset_container
from .defaults_loader import get_config_value, get_limit, get_model, get_timeout

logger = logging.getLogger(__name__)


class Services:
    """Constants for service names."""

    SETTINGS = "settings"
    SESSION_FACTORY = "session_factory"
    REMINDER_REPO = "reminder_repository"
    EXECUTION_REPO = "execution_repository"
    DRAFT_REPO = "draft_repository"
    USAGE_REPO = "usage_repository"
    GENERATOR = "content_generator"
    IDEMPOTENCY = "idempotency_guard"
    QUOTA = "quota_guard"
    DRAFT_WRITER = "draft_writer"
    RECORDER = "execution_recorder"
    ADVANCER = "reminder_advancer"
    ENGINE = "execution_engine"
    REMINDER_SCHEDULER = "reminder_scheduler"
    INITIALIZER = "reminder_initializer"
    CLEANUP = "execution_cleanup"
    TOOLS = "reminder_tools"


def setup_services(
    session_factory: async_sessionmaker[AsyncSession],
    container: Optional[ServiceContainer] = None,
) -> ServiceContainer:
    """
    Register all services in the container.

    Services are registered lazily - they won't be instantiated until
    first accessed via get_service().
    """
    container = container or get_container()
    container.register_instance(Services.SESSION_FACTORY, session_factory)

    # ========================================================================
    # Core
    # ========================================================================

    def create_settings(c):
        from .config import get_settings

        return get_settings()

    container.register(Services.SETTINGS, create_settings)

    # ========================================================================
    # Repositories
    # ========================================================================

    def create_reminder_repo(c):
        from ..infrastructure.repositories import SqlAlchemyReminderRepository

        return SqlAlchemyReminderRepository(c.get(Services.SESSION_FACTORY))

    def create_execution_repo(c):
        from ..infrastructure.repositories import SqlAlchemyExecutionRepository

        return SqlAlchemyExecutionRepository(c.get(Services.SESSION_FACTORY))

    def create_draft_repo(c):
        from ..infrastructure.repositories import SqlAlchemyDraftRepository

        return SqlAlchemyDraftRepository(c.get(Services.SESSION_FACTORY))

    def create_usage_repo(c):
        from ..infrastructure.repositories import SqlAlchemyUsageRepository

        return SqlAlchemyUsageRepository(c.get(Services.SESSION_FACTORY))

    container.register(Services.REMINDER_REPO, create_reminder_repo)
    container.register(Services.EXECUTION_REPO, create_execution_repo)
    container.register(Services.DRAFT_REPO, create_draft_repo)
    container.register(Services.USAGE_REPO, create_usage_repo)

    # ========================================================================
    # External API Services
    # ========================================================================

    def create_generator(c):
        from ..services.content_generator import LiteLLMContentGenerator

        return LiteLLMContentGenerator(
            api_key=c.get(Services.SETTINGS).openai_api_key,
            model=get_model(),
            max_output_tokens=int(get_config_value("generation.max_output_tokens", 500)),
            timeout_seconds=get_timeout("timeout_seconds"),
        )

    container.register(Services.GENERATOR, create_generator)

    # ========================================================================
    # Engine
    # ========================================================================

    def create_idempotency(c):
        from ..services.idempotency_guard import IdempotencyGuard

        return IdempotencyGuard(c.get(Services.EXECUTION_REPO))

    def create_quota(c):
        from ..services.quota_guard import QuotaGuard

        return QuotaGuard(
            c.get(Services.USAGE_REPO),
            user_limit=get_limit("user_daily_limit", 1),
            global_limit=get_limit("global_daily_limit", 100),
        )

    def create_draft_writer(c):
        from ..services.draft_writer import DraftWriter

        return DraftWriter(c.get(Services.DRAFT_REPO))

    def create_recorder(c):
        from ..services.execution_recorder import ExecutionRecorder

        return ExecutionRecorder(c.get(Services.EXECUTION_REPO))

    def create_advancer(c):
        from ..services.reminder_advancer import ReminderAdvancer

        return ReminderAdvancer(c.get(Services.REMINDER_REPO))

    def create_engine(c):
        from ..services.execution_engine import ExecutionEngine

        return ExecutionEngine(
            idempotency=c.get(Services.IDEMPOTENCY),
            quota=c.get(Services.QUOTA),
            drafts=c.get(Services.DRAFT_WRITER),
            recorder=c.get(Services.RECORDER),
            advancer=c.get(Services.ADVANCER),
            generator=c.get(Services.GENERATOR),
        )

    container.register(Services.IDEMPOTENCY, create_idempotency)
    container.register(Services.QUOTA, create_quota)
    container.register(Services.DRAFT_WRITER, create_draft_writer)
    container.register(Services.RECORDER, create_recorder)
    container.register(Services.ADVANCER, create_advancer)
    container.register(Services.ENGINE, create_engine)

    # ========================================================================
    # Trigger and maintenance
    # ========================================================================

    def create_reminder_scheduler(c):
        from ..services.reminder_scheduler import ReminderScheduler

        return ReminderScheduler(
            c.get(Services.REMINDER_REPO),
            c.get(Services.ENGINE),
            batch_size=int(get_config_value("scheduler.batch_size", 20)),
        )

    def create_initializer(c):
        from ..services.reminder_initializer import ReminderInitializer

        return ReminderInitializer(c.get(Services.REMINDER_REPO))

    def create_cleanup(c):
        from ..services.execution_cleanup import ExecutionCleanupService

        return ExecutionCleanupService(
            c.get(Services.EXECUTION_REPO),
            batch_size=int(get_config_value("cleanup.batch_size", 500)),
        )

    def create_tools(c):
        from ..services.reminder_tools import ReminderToolsService

        return ReminderToolsService(
            c.get(Services.REMINDER_REPO), c.get(Services.EXECUTION_REPO)
        )

    container.register(Services.REMINDER_SCHEDULER, create_reminder_scheduler)
    container.register(Services.INITIALIZER, create_initializer)
    container.register(Services.CLEANUP, create_cleanup)
    container.register(Services.TOOLS, create_tools)

    logger.info("All services registered in container")
    return container


def get_service(name: str) -> Any:
    """
    Get a service by name from the container.

    Raises:
        KeyError: If service is not registered
    """
    return get_container().get(name)


def reset_services() -> None:
    """Clear the container (useful for testing)."""
    reset_container()
    logger.info("Services reset")
