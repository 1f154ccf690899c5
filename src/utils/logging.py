import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

_FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
)


def _rotating_handler(
    path: Path, level: int, max_mb: int, backups: int
) -> logging.handlers.RotatingFileHandler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * 1024 * 1024, backupCount=backups
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_to_file: bool = True) -> None:
    """Set up logging for the worker.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_to_file:
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)
        root_logger.addHandler(
            _rotating_handler(logs_dir / "app.log", logging.INFO, max_mb=10, backups=5)
        )
        root_logger.addHandler(
            _rotating_handler(logs_dir / "errors.log", logging.ERROR, max_mb=5, backups=10)
        )


def get_execution_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Structured logger for reminder executions."""
    return structlog.get_logger(name or "reminder_execution")


class ExecutionLogContext:
    """Binds an execution identity into structlog contextvars.

    Everything logged through structlog inside the block carries
    ``user_id``, ``reminder_id`` and ``scheduled_for``. The previous
    bindings are restored on exit.
    """

    def __init__(self, user_id: str, reminder_id: str, scheduled_for: Optional[datetime]):
        self.context: Dict[str, Any] = {
            "user_id": user_id,
            "reminder_id": reminder_id,
            "scheduled_for": scheduled_for.isoformat() if scheduled_for else None,
        }
        self.logger = get_execution_logger()
        self.start_time: Optional[datetime] = None
        self._tokens: Dict[str, Any] = {}

    def __enter__(self) -> "ExecutionLogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        self.start_time = datetime.now(timezone.utc)
        self.logger.debug("Reminder execution started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = (datetime.now(timezone.utc) - self.start_time).total_seconds()
        if exc_type is not None:
            self.logger.error(
                "Reminder execution failed",
                error_type=exc_type.__name__,
                error=str(exc_val),
                processing_time_seconds=elapsed,
            )
        else:
            self.logger.debug(
                "Reminder execution finished", processing_time_seconds=elapsed
            )
        structlog.contextvars.reset_contextvars(**self._tokens)
