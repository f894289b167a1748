"""
Domain models for doctor availability schedules.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from pendulum import DateTime

REPEAT_WEEKS = 52
REPEAT_MONTHS = 12

DAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


class Weekday(IntEnum):
    """
    Day of the week, indexed the way doctors pick them in the schedule form.

    Note: Sunday is 0 here, while pendulum counts Monday as 0.
    """
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_name(cls, name: object) -> Optional["Weekday"]:
        """Map a day name to its weekday, or None for anything unknown."""
        if not isinstance(name, str):
            return None
        return _WEEKDAYS_BY_NAME.get(name.strip().lower())

    @classmethod
    def from_pendulum(cls, day_of_week: int) -> "Weekday":
        """Convert pendulum's Monday-based index."""
        return cls((day_of_week + 1) % 7)


_WEEKDAYS_BY_NAME = {name: Weekday(index) for index, name in enumerate(DAYS)}


class ScheduleType(str, Enum):
    """Which expander a schedule request goes through."""
    SINGLE_DAY = "single_day"
    REPEAT_WEEKS = "repeat_weeks"


@dataclass(frozen=True)
class TimeOfDay:
    """
    A validated hour/minute pair.

    Build it with ``parse_time_of_day``; it does not re-check its fields.
    """
    hour: int
    minute: int

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class DateInterval:
    """
    A concrete bookable slot.

    Invariant: start_time must not be after end_time. Zero-length
    intervals are allowed; they never overlap anything.
    """
    start_time: DateTime
    end_time: DateTime

    def __post_init__(self):
        if self.start_time > self.end_time:
            raise ValueError(
                f"Start time {self.start_time} must not be after end time {self.end_time}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end_time - self.start_time).total_seconds() / 60)

    def overlaps(self, other: "DateInterval") -> bool:
        """Half-open overlap check; touching intervals do not overlap."""
        return other.start_time < self.end_time and other.end_time > self.start_time

    def format_display(self) -> str:
        """
        Format the interval for display.
        Format: Weekday, DD.MM.YYYY | HH:MM - HH:MM
        """
        start = self.start_time
        weekday = DAYS[Weekday.from_pendulum(start.day_of_week)].capitalize()
        return (
            f"{weekday}, {start.format('DD.MM.YYYY')} | "
            f"{start.format('HH:mm')} - {self.end_time.format('HH:mm')}"
        )

    def __str__(self) -> str:
        return f"{self.start_time.format('DD.MM.YYYY HH:mm')} - {self.end_time.format('HH:mm')}"


@dataclass(frozen=True)
class LocatedInterval(DateInterval):
    """An interval pinned to a practice location."""
    location_id: str = ""


@dataclass(frozen=True)
class StoredSchedule(LocatedInterval):
    """
    A persisted schedule row as handed back by a schedule store.
    """
    id: str = ""
    doctor_id: str = ""
    max_appointments: int = 1
    visit_fee: float = 0.0
    serial_fee: float = 0.0
    discount_fee: Optional[float] = None
    booked: int = 0
