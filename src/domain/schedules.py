"""
Schedule descriptors, one validated shape per frequency.

The persisted ``schedule`` blob is owned by whoever created the reminder and
uses camelCase keys (``timeOfDay``, ``weekDays``). It is turned into one of
these frozen models at the boundary by ``parse_schedule``; snake_case keys
are accepted as well.
"""

import re
from datetime import date as date_type
from datetime import time
from typing import Any, Mapping, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models.reminder import Frequency
from .errors import InvalidSchedule, UnsupportedFrequency

_TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:mm`` (hour 0-23, minute 0-59)."""
    match = _TIME_OF_DAY.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"timeOfDay must be HH:mm, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"timeOfDay out of range: {value!r}")
    return time(hour, minute)


def load_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, raising ``ValueError`` for unknown names."""
    if not isinstance(name, str) or not name.strip():
        raise ValueError("timezone is required")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown timezone {name!r}") from e


class _Schedule(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class _TimedSchedule(_Schedule):
    """Shared optional ``timeOfDay`` / ``timezone`` pair."""

    time_of_day: Optional[str] = Field(default=None, alias="timeOfDay")
    timezone: Optional[str] = None

    @field_validator("time_of_day")
    @classmethod
    def time_of_day_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_time_of_day(v)
        return v

    @field_validator("timezone")
    @classmethod
    def timezone_known(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            load_zone(v)
        return v

    @property
    def local_time(self) -> Optional[time]:
        return parse_time_of_day(self.time_of_day) if self.time_of_day else None

    @property
    def zone(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.timezone) if self.timezone else None


class OneTimeSchedule(_TimedSchedule):
    """Runs once on ``date`` (local, at ``timeOfDay`` in ``timezone``)."""

    date: str

    @field_validator("date")
    @classmethod
    def date_is_iso(cls, v: str) -> str:
        if not _ISO_DATE.match(v):
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        date_type.fromisoformat(v)
        return v

    @property
    def local_date(self) -> date_type:
        return date_type.fromisoformat(self.date)


class DailySchedule(_TimedSchedule):
    """Daily reminders advance by a fixed 24h; the fields only matter at creation."""


class WeeklySchedule(_Schedule):
    """Runs on ISO weekdays (Monday=1 .. Sunday=7) at a local wall-clock time."""

    time_of_day: str = Field(alias="timeOfDay")
    timezone: str
    week_days: Tuple[int, ...] = Field(alias="weekDays")

    @field_validator("time_of_day")
    @classmethod
    def time_of_day_valid(cls, v: str) -> str:
        parse_time_of_day(v)
        return v

    @field_validator("timezone")
    @classmethod
    def timezone_known(cls, v: str) -> str:
        load_zone(v)
        return v

    @field_validator("week_days", mode="before")
    @classmethod
    def week_days_iso(cls, v: Any) -> Tuple[int, ...]:
        if not isinstance(v, (list, tuple, set, frozenset)) or not v:
            raise ValueError("weekDays must be a non-empty list")
        for day in v:
            if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 7:
                raise ValueError(f"weekDays entries must be integers 1-7, got {day!r}")
        return tuple(sorted(set(v)))

    @property
    def local_time(self) -> time:
        return parse_time_of_day(self.time_of_day)

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


Schedule = Union[OneTimeSchedule, DailySchedule, WeeklySchedule]

_SCHEDULE_TYPES = {
    Frequency.ONE_TIME: OneTimeSchedule,
    Frequency.DAILY: DailySchedule,
    Frequency.WEEKLY: WeeklySchedule,
}


def coerce_frequency(value: Any) -> Frequency:
    """Map a stored frequency string onto ``Frequency``.

    Raises:
        UnsupportedFrequency: for anything that is not a known frequency.
    """
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(value)
    except ValueError:
        raise UnsupportedFrequency(value) from None


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ())) or "schedule"
    return f"{field}: {first.get('msg', 'invalid')}"


def parse_schedule(frequency: Any, raw: Union[Schedule, Mapping[str, Any], None]) -> Schedule:
    """Validate a raw schedule blob into the variant for ``frequency``.

    Raises:
        UnsupportedFrequency: unknown frequency.
        InvalidSchedule: the blob does not fit the frequency's shape.
    """
    freq = coerce_frequency(frequency)
    model = _SCHEDULE_TYPES[freq]

    if isinstance(raw, model):
        return raw
    if raw is None and freq == Frequency.DAILY:
        return DailySchedule()
    if not isinstance(raw, Mapping):
        raise InvalidSchedule(freq.value, "schedule is missing")

    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        raise InvalidSchedule(freq.value, _describe(e)) from e
