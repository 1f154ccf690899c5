"""
Typed domain errors for the reminder engine.

Two families matter to callers: bad caller-supplied data (``InvalidSchedule``),
which the recurrence code turns into "no next run", and programming errors
(``UnsupportedFrequency``, ``InvalidScheduledTime``), which propagate until
the execution engine's outer boundary.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain-specific errors."""


# ---------------------------------------------------------------------------
# Recurrence
# ---------------------------------------------------------------------------


class InvalidSchedule(DomainError):
    """Schedule descriptor is missing fields or holds out-of-range values."""

    def __init__(self, frequency: str, reason: str) -> None:
        self.frequency = frequency
        self.reason = reason
        super().__init__(f"Invalid {frequency} schedule: {reason}")


class UnsupportedFrequency(DomainError):
    """Frequency value the recurrence calculator does not know."""

    def __init__(self, frequency: Any) -> None:
        self.frequency = frequency
        super().__init__(f"Unsupported frequency: {frequency!r}")


class InvalidScheduledTime(DomainError):
    """Due time is missing, naive, or otherwise unusable as a UTC instant."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid scheduledForUTC: {value!r}")


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class GenerationFailure(DomainError):
    """Content generation could not produce text (bad input, provider error)."""


# ---------------------------------------------------------------------------
# Reminder tools
# ---------------------------------------------------------------------------


class ReminderNotFound(DomainError):
    """No reminder exists for the given user and reminder id."""

    def __init__(self, user_id: str, reminder_id: str) -> None:
        self.user_id = user_id
        self.reminder_id = reminder_id
        super().__init__(f"Reminder {reminder_id} not found for user {user_id}")
