"""
Selection of schedules that are still bookable.

Both selectors accept any objects (or mappings) carrying ``start_time`` and
``end_time`` as datetimes or ISO-8601 strings, and hand back the original
objects untouched.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar

from pendulum import DateTime

from .clock import DEFAULT_TIMEZONE, resolve_now, to_datetime

T = TypeVar("T")


def get_upcoming_schedules(
    schedules: Sequence[T],
    *,
    now: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[T]:
    """Return every schedule that has not ended yet, in input order."""
    current = resolve_now(now, timezone)
    return [
        schedule for schedule in schedules
        if _read_time(schedule, "end_time", timezone) > current
    ]


def get_next_date_schedules(
    schedules: Sequence[T],
    *,
    now: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[T]:
    """
    Return today's schedules that have not ended yet, sorted by start.

    Only schedules starting today count. If today has nothing left the
    result is empty, even when later days have schedules.
    """
    if not schedules:
        return []

    current = resolve_now(now, timezone)
    start_of_today = current.start_of("day")
    start_of_tomorrow = start_of_today.add(days=1)

    todays: List[T] = []
    for schedule in schedules:
        start = _read_time(schedule, "start_time", timezone)
        end = _read_time(schedule, "end_time", timezone)

        if start >= start_of_today and end > current and start < start_of_tomorrow:
            todays.append(schedule)

    return sorted(todays, key=lambda schedule: _read_time(schedule, "start_time", timezone))


def _read_time(schedule: object, field: str, timezone: str) -> DateTime:
    if isinstance(schedule, Mapping):
        value = schedule[field]
    else:
        value = getattr(schedule, field)
    return to_datetime(value, timezone)
