"""
Day list assembly

Projects a calendar's stored day rows into the list a viewer receives,
applying the viewer role and the day gate. Read-only: rows are never modified.
"""
from datetime import date, datetime
from typing import Iterable, Optional, Protocol

from advent.calendar.gate import StartDate, get_timezone, is_day_unlockable, parse_start_date
from advent.calendar.schemas import DayView, ViewerRole


class DayRow(Protocol):
    day_number: int
    content_type: str
    title: Optional[str]
    content: Optional[str]


def locked_day(day_number: int) -> DayView:
    return DayView(day=day_number, locked=True, type="text", title=None, content=None)


def assemble_days(
    start_date: StartDate,
    rows: Iterable[DayRow],
    role: ViewerRole,
    now: datetime,
    tz=None,
) -> list[DayView]:
    """
    Build the ordered view of days 1..N for one viewer.

    N is the highest stored day number, so a missing row inside the range
    shows up as a locked placeholder instead of shortening the calendar.

    - ADMIN sees every stored row unlocked, whatever the date.
    - GUEST_WITH_ACCESS sees the rows the day gate has opened.
    - GUEST_LOCKED sees nothing.

    Locked days carry no title or content even when the row has them.

    Raises:
        ConfigurationError: If a non-admin view needs the gate and the start date is unusable
    """
    by_day = {row.day_number: row for row in rows}
    if not by_day:
        return []

    total = max(by_day)
    tz = tz or get_timezone()
    start: Optional[date] = None

    days = []
    for day_number in range(1, total + 1):
        row = by_day.get(day_number)

        if role is ViewerRole.ADMIN:
            unlockable = True
        elif role is ViewerRole.GUEST_WITH_ACCESS:
            if start is None:
                start = parse_start_date(start_date, tz)
            unlockable = is_day_unlockable(day_number, start, now, tz)
        else:
            unlockable = False

        if unlockable and row is not None:
            days.append(DayView(
                day=day_number,
                locked=False,
                type=row.content_type,
                title=row.title,
                content=row.content,
            ))
        else:
            days.append(locked_day(day_number))

    return days
