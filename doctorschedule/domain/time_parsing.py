"""
Parsing and validation of "HH:MM" time-of-day strings.
"""

import re
from typing import Optional, Tuple

from .models import TimeOfDay

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def is_valid_time(text: object) -> bool:
    """
    Check that ``text`` is an ``H:MM`` or ``HH:MM`` time of day.

    Seconds, out-of-range parts and non-numeric input are rejected.
    """
    if not isinstance(text, str):
        return False
    return TIME_PATTERN.fullmatch(text) is not None


def parse_time(text: object) -> Tuple[Optional[int], Optional[int]]:
    """
    Split a time string into ``(hour, minute)``.

    Returns ``(None, None)`` if either part is missing, not an integer, or
    out of range. Callers treat that as "no schedule can be built".
    """
    if not isinstance(text, str):
        return None, None

    parts = text.split(":")
    if len(parts) != 2:
        return None, None

    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None, None

    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        return None, None

    return hour, minute


def parse_time_of_day(text: object) -> Optional[TimeOfDay]:
    """Parse a strictly formatted time string into a ``TimeOfDay``."""
    if not is_valid_time(text):
        return None

    hour, minute = parse_time(text)
    if hour is None or minute is None:
        return None

    return TimeOfDay(hour=hour, minute=minute)
