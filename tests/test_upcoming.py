"""
Tests for the upcoming and next-date schedule selectors.
"""

from dataclasses import dataclass

import pendulum
from pendulum import DateTime

from doctorschedule.domain.upcoming import get_next_date_schedules, get_upcoming_schedules

TZ = "UTC"
FIXED_NOW = pendulum.datetime(2023, 10, 1, 12, 0, tz=TZ)


def _schedule(schedule_id: str, start_hours: float, end_hours: float) -> dict:
    return {
        "id": schedule_id,
        "start_time": FIXED_NOW.add(minutes=int(start_hours * 60)),
        "end_time": FIXED_NOW.add(minutes=int(end_hours * 60)),
    }


PAST = [
    _schedule("1", -24, -23),  # yesterday
    _schedule("2", -48, -48),  # day before yesterday
]
TODAY_ENDED = [
    _schedule("3", -1, -0.5),
    _schedule("4", -3, -2),
]
TODAY_FIRST = _schedule("5", 0, 2)
TODAY_SECOND = _schedule("6", 2, 3)
DAY_AFTER_TOMORROW = _schedule("7", 48, 50)


class TestGetNextDateSchedules:
    """Tests for get_next_date_schedules."""

    def test_empty_input(self):
        """Test that no schedules give no result."""
        assert get_next_date_schedules([], now=FIXED_NOW, timezone=TZ) == []

    def test_no_upcoming_schedules(self):
        """Test that past and already ended schedules are dropped."""
        assert get_next_date_schedules(PAST, now=FIXED_NOW, timezone=TZ) == []
        assert get_next_date_schedules(TODAY_ENDED, now=FIXED_NOW, timezone=TZ) == []

    def test_only_todays_remaining_schedules(self):
        """Test that ended and later-day schedules are excluded."""
        result = get_next_date_schedules(
            TODAY_ENDED + [TODAY_SECOND, TODAY_FIRST, DAY_AFTER_TOMORROW],
            now=FIXED_NOW,
            timezone=TZ,
        )

        assert result == [TODAY_FIRST, TODAY_SECOND]

    def test_sorted_by_start_time(self):
        """Test that the result is ordered by start."""
        result = get_next_date_schedules([TODAY_SECOND, TODAY_FIRST], now=FIXED_NOW, timezone=TZ)

        assert result == [TODAY_FIRST, TODAY_SECOND]

    def test_later_days_only_returns_empty(self):
        """Test that tomorrow's slots are not rolled forward into the result."""
        tomorrow = _schedule("8", 22, 23)  # 10:00 tomorrow

        assert get_next_date_schedules([tomorrow, DAY_AFTER_TOMORROW], now=FIXED_NOW, timezone=TZ) == []

    def test_running_schedule_is_included(self):
        """Test a schedule that started earlier today and is still running."""
        running = _schedule("9", -1, 1)

        assert get_next_date_schedules([running], now=FIXED_NOW, timezone=TZ) == [running]

    def test_today_is_local_to_timezone(self):
        """Test that "today" follows the configured timezone, not UTC."""
        now = pendulum.datetime(2023, 10, 1, 23, 30, tz="Europe/Berlin")  # 21:30 UTC
        late_evening = {
            "start_time": pendulum.datetime(2023, 10, 1, 23, 45, tz="Europe/Berlin"),
            "end_time": pendulum.datetime(2023, 10, 1, 23, 55, tz="Europe/Berlin"),
        }
        after_midnight = {
            "start_time": pendulum.datetime(2023, 10, 2, 0, 15, tz="Europe/Berlin"),
            "end_time": pendulum.datetime(2023, 10, 2, 1, 0, tz="Europe/Berlin"),
        }

        result = get_next_date_schedules([after_midnight, late_evening], now=now, timezone="Europe/Berlin")

        assert result == [late_evening]

    def test_accepts_iso_strings_and_objects(self):
        """Test rows carrying ISO strings and attribute-style objects."""

        @dataclass
        class Row:
            start_time: DateTime
            end_time: DateTime

        as_strings = {"start_time": "2023-10-01T15:00:00+00:00", "end_time": "2023-10-01T16:00:00+00:00"}
        as_object = Row(start_time=FIXED_NOW.add(hours=1), end_time=FIXED_NOW.add(hours=2))

        result = get_next_date_schedules([as_strings, as_object], now=FIXED_NOW, timezone=TZ)

        assert result == [as_object, as_strings]


class TestGetUpcomingSchedules:
    """Tests for get_upcoming_schedules."""

    def test_keeps_schedules_not_ended(self):
        """Test that only ended schedules are removed, in input order."""
        schedules = [DAY_AFTER_TOMORROW] + PAST + [TODAY_SECOND] + TODAY_ENDED + [TODAY_FIRST]

        result = get_upcoming_schedules(schedules, now=FIXED_NOW, timezone=TZ)

        assert result == [DAY_AFTER_TOMORROW, TODAY_SECOND, TODAY_FIRST]

    def test_schedule_ending_now_is_dropped(self):
        """Test that end == now counts as ended."""
        ending_now = _schedule("10", -1, 0)

        assert get_upcoming_schedules([ending_now], now=FIXED_NOW, timezone=TZ) == []

    def test_empty_input(self):
        """Test that no schedules give no result."""
        assert get_upcoming_schedules([], now=FIXED_NOW, timezone=TZ) == []
