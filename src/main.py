"""
Reminder worker entry point.

Scans for due reminders every ``scheduler.interval_seconds`` and sweeps
expired execution records once a day. ``--once`` runs a single scan and
exits, which is what an external cron would call.
"""

import argparse
import asyncio
import logging
from datetime import time
from typing import List, Optional

from .core.config import get_settings
from .core.database import (
    close_database,
    get_session_factory,
    health_check,
    init_database,
)
from .core.defaults_loader import get_config_value, get_scheduler_value
from .core.services import Services, get_service, setup_services
from .services.scheduler import AsyncioScheduler, ScheduledJob, ScheduleType
from .utils.logging import setup_logging
from .version import __version__

logger = logging.getLogger(__name__)


def _parse_daily_at(value: str) -> time:
    hour, minute = str(value).split(":", 1)
    return time(int(hour), int(minute))


def build_jobs() -> List[ScheduledJob]:
    """The worker's periodic jobs, with cadence taken from configuration."""
    reminder_scheduler = get_service(Services.REMINDER_SCHEDULER)
    cleanup = get_service(Services.CLEANUP)
    ttl_days = int(get_config_value("cleanup.execution_ttl_days", 30))

    async def scan_due_reminders() -> None:
        await reminder_scheduler.run_once()

    async def cleanup_executions() -> None:
        await cleanup.cleanup_expired(ttl_days=ttl_days)

    return [
        ScheduledJob(
            name="scan_due_reminders",
            callback=scan_due_reminders,
            schedule_type=ScheduleType.INTERVAL,
            interval_seconds=get_scheduler_value("interval_seconds", 300),
            first_delay_seconds=get_scheduler_value("first_delay_seconds", 5),
        ),
        ScheduledJob(
            name="cleanup_executions",
            callback=cleanup_executions,
            schedule_type=ScheduleType.DAILY,
            daily_times=[_parse_daily_at(get_config_value("cleanup.daily_at", "03:15"))],
        ),
    ]


async def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Reminder execution worker")
    parser.add_argument("--once", action="store_true", help="Run one scan and exit")
    parser.add_argument(
        "--cleanup", action="store_true", help="Run execution cleanup once and exit"
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_to_file=settings.log_to_file)
    logger.info("Reminder worker %s starting (%s)", __version__, settings.environment)

    await init_database()

    try:
        if not await health_check():
            logger.error("Database is not reachable, worker not started")
            return
        setup_services(await get_session_factory())

        if args.once:
            await get_service(Services.REMINDER_SCHEDULER).run_once()
            return
        if args.cleanup:
            ttl_days = int(get_config_value("cleanup.execution_ttl_days", 30))
            await get_service(Services.CLEANUP).cleanup_expired(ttl_days=ttl_days)
            return

        scheduler = AsyncioScheduler()
        for job in build_jobs():
            scheduler.schedule(job)
        await scheduler.start()
        try:
            await scheduler.wait()
        finally:
            await scheduler.stop()
    finally:
        await close_database()
        logger.info("Reminder worker stopped")


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
