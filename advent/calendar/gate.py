"""
Day gating

Decides whether a calendar day may be revealed to a non-admin viewer. Day
boundaries follow the local calendar date in the reference timezone: day N
opens at local midnight of the (N-1)th day after the start date, whatever
the time of day the calendar was created.
"""
from datetime import date, datetime
from typing import Optional, Union

import pytz

from advent.calendar.constants import REFERENCE_TIMEZONE
from advent.shared.errors import ConfigurationError

StartDate = Union[date, datetime, str, None]


def get_timezone(name: str = REFERENCE_TIMEZONE):
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as exc:
        raise ConfigurationError(f"Unknown reference timezone: {name!r}") from exc


def get_now() -> datetime:
    """Current instant in UTC. FastAPI dependency; tests override it."""
    return datetime.now(pytz.utc)


def parse_start_date(value: StartDate, tz=None) -> date:
    """
    Resolve a stored start date to a local calendar date.

    Accepts a date, a datetime (naive values are taken as local time in the
    reference timezone) or an ISO 8601 string of either.

    Raises:
        ConfigurationError: If the value is missing or cannot be parsed
    """
    tz = tz or get_timezone()

    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError("Calendar start date is missing")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = date.fromisoformat(text) if len(text) == 10 else datetime.fromisoformat(text)
        except ValueError as exc:
            raise ConfigurationError(f"Calendar start date is not a valid date: {text!r}") from exc

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    if isinstance(value, date):
        return value

    raise ConfigurationError(f"Calendar start date has unsupported type {type(value).__name__}")


def local_today(now: datetime, tz=None) -> date:
    """Calendar date of ``now`` in the reference timezone (naive ``now`` is UTC)."""
    tz = tz or get_timezone()
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz).date()


def days_elapsed(start: date, today: date) -> int:
    """Whole local days from start to today; negative before the start date."""
    return (today - start).days


def is_day_unlockable(day_number: int, start_date: StartDate, now: Optional[datetime] = None, tz=None) -> bool:
    """
    True iff ``day_number`` is reached on ``now``'s local date.

    Day 1 opens on the start date itself, day N on start + (N - 1) days.

    Raises:
        ValueError: If day_number is not a positive integer
        ConfigurationError: If start_date is missing or malformed
    """
    if day_number < 1:
        raise ValueError(f"Day number must be positive, got {day_number}")

    tz = tz or get_timezone()
    start = parse_start_date(start_date, tz)
    today = local_today(now if now is not None else get_now(), tz)
    return days_elapsed(start, today) >= day_number - 1
