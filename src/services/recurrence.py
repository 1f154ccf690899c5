"""
Recurrence calculator.

Pure functions: no I/O and no clock reads (``now`` is always passed in).
All inputs and outputs are timezone-aware UTC datetimes; every local-time
step goes through ``zoneinfo`` so wall-clock times survive DST changes.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Mapping, Optional, Union
from zoneinfo import ZoneInfo

from ..domain.errors import InvalidSchedule, InvalidScheduledTime
from ..domain.schedules import (
    DailySchedule,
    OneTimeSchedule,
    Schedule,
    WeeklySchedule,
    coerce_frequency,
    parse_schedule,
)
from ..models.reminder import Frequency

logger = logging.getLogger(__name__)

DAILY_INTERVAL = timedelta(hours=24)

RawSchedule = Union[Schedule, Mapping[str, Any], None]


def _require_utc(value: Any) -> datetime:
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise InvalidScheduledTime(value)
    return value.astimezone(timezone.utc)


def _local_to_utc(day: date, at: time, zone: ZoneInfo) -> datetime:
    """Anchor a local wall-clock time and convert it to UTC.

    Times inside a DST gap resolve with ``fold=0`` (the pre-transition
    offset), which lands them just after the jump.
    """
    return datetime.combine(day, at, tzinfo=zone).astimezone(timezone.utc)


def next_weekly_run(scheduled_for_utc: datetime, schedule: WeeklySchedule) -> datetime:
    """Next configured weekday after the one that just fired, at ``timeOfDay``."""
    zone = schedule.zone
    local = scheduled_for_utc.astimezone(zone)
    current = local.isoweekday()

    later = [d for d in schedule.week_days if d > current]
    if later:
        days_ahead = later[0] - current
    else:
        days_ahead = 7 - current + schedule.week_days[0]

    target = local.date() + timedelta(days=days_ahead)
    return _local_to_utc(target, schedule.local_time, zone)


def next_run(
    frequency: Any,
    scheduled_for_utc: datetime,
    schedule: RawSchedule = None,
) -> Optional[datetime]:
    """Compute the next due time from the due time that just fired.

    Args:
        frequency: ``one_time``, ``daily`` or ``weekly``.
        scheduled_for_utc: The occurrence being advanced (never wall-clock now).
        schedule: Required for ``weekly``; ignored otherwise.

    Returns:
        The next UTC due time, or None when the reminder should not run
        again (one-time, or an unusable weekly schedule).

    Raises:
        UnsupportedFrequency: unknown frequency.
        InvalidScheduledTime: ``scheduled_for_utc`` missing or naive.
    """
    freq = coerce_frequency(frequency)
    if freq == Frequency.ONE_TIME:
        return None

    base = _require_utc(scheduled_for_utc)

    if freq == Frequency.DAILY:
        return base + DAILY_INTERVAL

    try:
        weekly = parse_schedule(freq, schedule)
    except InvalidSchedule as e:
        logger.warning("Cannot compute weekly next run: %s", e)
        return None
    return next_weekly_run(base, weekly)


# ---------------------------------------------------------------------------
# Initial schedule (reminder creation only)
# ---------------------------------------------------------------------------


def _initial_one_time(schedule: OneTimeSchedule) -> Optional[datetime]:
    if schedule.local_time is None or schedule.zone is None:
        logger.warning("one_time schedule needs timeOfDay and timezone")
        return None
    return _local_to_utc(schedule.local_date, schedule.local_time, schedule.zone)


def _initial_daily(schedule: DailySchedule, now: datetime) -> Optional[datetime]:
    if schedule.local_time is None or schedule.zone is None:
        logger.warning("daily schedule needs timeOfDay and timezone")
        return None
    zone = schedule.zone
    today = now.astimezone(zone).date()
    candidate = _local_to_utc(today, schedule.local_time, zone)
    if candidate <= now:
        candidate = _local_to_utc(today + timedelta(days=1), schedule.local_time, zone)
    return candidate


def _initial_weekly(schedule: WeeklySchedule, now: datetime) -> datetime:
    zone = schedule.zone
    today = now.astimezone(zone).date()
    if today.isoweekday() in schedule.week_days:
        candidate = _local_to_utc(today, schedule.local_time, zone)
        if candidate > now:
            return candidate
    return next_weekly_run(now, schedule)


def initial_next_run(
    frequency: Any,
    schedule: RawSchedule,
    now: datetime,
) -> Optional[datetime]:
    """First occurrence of a newly created reminder, at or after ``now``.

    A same-day time that has not yet passed is still selected; a time equal
    to ``now`` rolls forward. One-time reminders resolve their local date
    and time as given, even if that moment is already in the past.

    Returns:
        The first UTC due time, or None when the schedule is unusable.

    Raises:
        UnsupportedFrequency: unknown frequency.
        InvalidScheduledTime: ``now`` is naive.
    """
    freq = coerce_frequency(frequency)
    now = _require_utc(now)

    try:
        parsed = parse_schedule(freq, schedule)
    except InvalidSchedule as e:
        logger.warning("Cannot compute initial run: %s", e)
        return None

    if freq == Frequency.ONE_TIME:
        return _initial_one_time(parsed)
    if freq == Frequency.DAILY:
        return _initial_daily(parsed, now)
    return _initial_weekly(parsed, now)
