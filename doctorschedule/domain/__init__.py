"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import DAYS, DateInterval, LocatedInterval, ScheduleType, TimeOfDay, Weekday
from .overlap import filter_conflicts, is_overlapping
from .schedule_expander import get_monthly_schedule_dates, get_weekly_schedule_dates
from .time_parsing import is_valid_time, parse_time, parse_time_of_day
from .upcoming import get_next_date_schedules, get_upcoming_schedules

__all__ = [
    "DAYS",
    "DateInterval",
    "LocatedInterval",
    "ScheduleType",
    "TimeOfDay",
    "Weekday",
    "filter_conflicts",
    "get_monthly_schedule_dates",
    "get_next_date_schedules",
    "get_upcoming_schedules",
    "get_weekly_schedule_dates",
    "is_overlapping",
    "is_valid_time",
    "parse_time",
    "parse_time_of_day",
]
