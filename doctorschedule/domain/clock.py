"""
Helpers for turning "now" and loosely typed date inputs into pendulum values.

Every function that depends on the current time accepts an explicit ``now``
so tests can pass fixed instants instead of patching the system clock.
"""

from datetime import date, datetime
from typing import Optional, Union

import pendulum
from pendulum import Date, DateTime

DEFAULT_TIMEZONE = "Europe/Berlin"

DateLike = Union[date, datetime, str]


def resolve_now(now: Optional[datetime] = None, timezone: str = DEFAULT_TIMEZONE) -> DateTime:
    """Return ``now`` in ``timezone``, reading the clock only if it is missing."""
    if now is None:
        return pendulum.now(timezone)
    return to_datetime(now, timezone)


def to_datetime(value: Union[datetime, str], timezone: str = DEFAULT_TIMEZONE) -> DateTime:
    """
    Convert a datetime or ISO-8601 string into a DateTime in ``timezone``.

    Naive values are read as wall-clock time in ``timezone``.
    """
    if isinstance(value, str):
        parsed = pendulum.parse(value, tz=timezone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Not a date-time value: {value!r}")
        return parsed.in_timezone(timezone)

    return pendulum.instance(value, tz=timezone).in_timezone(timezone)


def to_civil_date(value: DateLike, timezone: str = DEFAULT_TIMEZONE) -> Date:
    """
    Reduce a date-like value to its calendar date in ``timezone``.

    Aware datetimes are converted first, so an instant keeps the day it
    falls on locally.
    """
    if isinstance(value, (datetime, str)):
        value = to_datetime(value, timezone)
    return pendulum.date(value.year, value.month, value.day)
