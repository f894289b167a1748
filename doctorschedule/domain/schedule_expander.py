"""
Expansion of a doctor's availability declaration into dated intervals.

This is pure domain logic: callers hand in plain dates and "HH:MM" strings
and get back a list of DateInterval objects. Invalid input never raises,
it just produces an empty list.

All arithmetic happens on calendar dates. The time of day is stamped on
afterwards in the configured timezone, so a 14:00 slot reads 14:00 on
both sides of a daylight-saving change.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pendulum
from pendulum import Date

from .clock import DEFAULT_TIMEZONE, DateLike, resolve_now, to_civil_date
from .models import REPEAT_MONTHS, REPEAT_WEEKS, DateInterval, TimeOfDay, Weekday
from .time_parsing import parse_time_of_day

logger = logging.getLogger(__name__)


def get_monthly_schedule_dates(
    anchor_date: Optional[DateLike] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    repeat_monthly: bool = False,
    *,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[DateInterval]:
    """
    Build the intervals for a single-day schedule.

    Args:
        anchor_date: The day the schedule starts on
        start_time: Opening time ("HH:MM")
        end_time: Closing time ("HH:MM")
        repeat_monthly: Repeat on the same day of month for 12 months
        timezone: IANA timezone the times of day are expressed in

    Returns:
        One interval, up to twelve when repeating, or [] for invalid input.
        Months lacking the anchor's day of month (e.g. the 31st) are skipped.
    """
    if anchor_date is None or not start_time or not end_time:
        return []

    opens = parse_time_of_day(start_time)
    closes = parse_time_of_day(end_time)
    if opens is None or closes is None:
        return []

    anchor = to_civil_date(anchor_date, timezone)

    logger.debug(
        "Expanding monthly schedule: date=%s start=%s end=%s repeat=%s",
        anchor, opens, closes, repeat_monthly,
    )

    if not repeat_monthly:
        interval = _build_interval(anchor, opens, closes, timezone)
        return [interval] if interval else []

    intervals: List[DateInterval] = []

    for offset in range(REPEAT_MONTHS):
        day = _same_day_in_later_month(anchor, offset)
        if day is None:
            continue

        interval = _build_interval(day, opens, closes, timezone)
        if interval:
            intervals.append(interval)

    logger.debug("Monthly schedule produced %d interval(s)", len(intervals))
    return intervals


def get_weekly_schedule_dates(
    weekdays: Optional[Iterable[object]] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    repeat_weekly: bool = False,
    *,
    now: Optional[datetime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[DateInterval]:
    """
    Build the intervals for a weekly schedule.

    Each selected weekday maps to its next occurrence strictly after today.
    With ``repeat_weekly`` the same is done from each of the following 51
    weeks as well. Unknown day names are skipped.

    Returns:
        Intervals sorted by start time, or [] for invalid input.
    """
    if not weekdays:
        return []

    opens = parse_time_of_day(start_time)
    closes = parse_time_of_day(end_time)
    if opens is None or closes is None:
        return []

    # Unknown names drop out; duplicates collapse to one weekday
    selected = list(dict.fromkeys(
        day for day in map(Weekday.from_name, weekdays) if day is not None
    ))
    if not selected:
        return []

    today = to_civil_date(resolve_now(now, timezone), timezone)
    weeks = REPEAT_WEEKS if repeat_weekly else 1

    logger.debug(
        "Expanding weekly schedule: days=%s start=%s end=%s weeks=%d",
        [day.name.lower() for day in selected], opens, closes, weeks,
    )

    intervals: List[DateInterval] = []

    for week in range(weeks):
        anchor = today.add(weeks=week)

        for weekday in selected:
            interval = _build_interval(
                next_occurrence(anchor, weekday), opens, closes, timezone
            )
            if interval:
                intervals.append(interval)

    intervals.sort(key=lambda interval: interval.start_time)

    logger.debug("Weekly schedule produced %d interval(s)", len(intervals))
    return intervals


def next_occurrence(day: Date, weekday: Weekday) -> Date:
    """
    Return the first date after ``day`` that falls on ``weekday``.

    ``day`` itself never counts, even if it is that weekday.
    """
    current = day.isoweekday() % 7  # Sunday=0
    days_ahead = (weekday - current) % 7 or 7
    return day.add(days=days_ahead)


def _same_day_in_later_month(anchor: Date, offset: int) -> Optional[Date]:
    """
    Move ``anchor`` forward by ``offset`` months keeping its day of month.

    Returns None when the target month is too short for that day.
    """
    months = anchor.month - 1 + offset
    year = anchor.year + months // 12
    month = months % 12 + 1

    if anchor.day > pendulum.date(year, month, 1).days_in_month:
        return None

    return pendulum.date(year, month, anchor.day)


def _build_interval(
    day: Date,
    opens: TimeOfDay,
    closes: TimeOfDay,
    timezone: str,
) -> Optional[DateInterval]:
    """
    Stamp the times of day onto ``day``.

    Returns None if the interval would end before it starts, or if a
    non-empty window collapses to nothing because both ends fall into a
    DST gap.
    """
    start = pendulum.datetime(day.year, day.month, day.day, opens.hour, opens.minute, tz=timezone)
    end = pendulum.datetime(day.year, day.month, day.day, closes.hour, closes.minute, tz=timezone)

    if start > end:
        return None

    if start == end and opens != closes:
        logger.debug("Dropping %s-%s on %s: window lies in a DST gap", opens, closes, day)
        return None

    return DateInterval(start_time=start, end_time=end)
