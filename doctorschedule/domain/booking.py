"""
Small helpers used when patients book into a schedule.
"""

from datetime import datetime
from typing import Optional, Tuple

from .clock import DEFAULT_TIMEZONE, resolve_now, to_datetime

BOOKING_CUTOFF_HOURS = 6


def is_start_time_more_than_hours_ahead(
    start_time: datetime,
    hours: int = BOOKING_CUTOFF_HOURS,
    *,
    now: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> bool:
    """
    Check that a schedule starts more than ``hours`` whole hours from now.

    Partial hours are truncated, so 6h59m counts as 6 hours.
    """
    current = resolve_now(now, timezone)
    start = to_datetime(start_time, timezone)

    if start <= current:
        return False

    return current.diff(start).in_hours() > hours


def get_hours_and_minutes(time_value: datetime) -> Tuple[int, int]:
    """Return the wall-clock hour and minute of a datetime."""
    return time_value.hour, time_value.minute


def seats_left(max_appointments: int, booked: int) -> int:
    """Number of bookings a schedule can still take."""
    return max(max_appointments - booked, 0)


def has_capacity(max_appointments: int, booked: int) -> bool:
    return max_appointments > booked
