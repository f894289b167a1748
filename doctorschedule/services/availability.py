"""
Read-side views over a doctor's stored schedules.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..domain.booking import BOOKING_CUTOFF_HOURS, has_capacity, is_start_time_more_than_hours_ahead
from ..domain.clock import DEFAULT_TIMEZONE
from ..domain.models import StoredSchedule
from ..domain.upcoming import get_next_date_schedules, get_upcoming_schedules
from .schedule_planner import ScheduleStoreProtocol


class AvailabilityService:
    """
    Answers "what can a patient still book" from the stored schedules.
    """

    def __init__(
        self,
        store: ScheduleStoreProtocol,
        timezone: str = DEFAULT_TIMEZONE,
        booking_cutoff_hours: int = BOOKING_CUTOFF_HOURS,
    ) -> None:
        self._store = store
        self._timezone = timezone
        self._booking_cutoff_hours = booking_cutoff_hours

    async def next_date(
        self,
        location_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[StoredSchedule]:
        """Today's remaining schedules, as shown on a doctor's profile."""
        schedules = await self._store.find_all(location_id)
        return get_next_date_schedules(schedules, now=now, timezone=self._timezone)

    async def upcoming(
        self,
        location_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[StoredSchedule]:
        """All schedules that have not ended yet, ordered by start."""
        schedules = await self._store.find_all(location_id)
        upcoming = get_upcoming_schedules(schedules, now=now, timezone=self._timezone)
        return sorted(upcoming, key=lambda schedule: schedule.start_time)

    async def bookable(
        self,
        location_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[StoredSchedule]:
        """
        Upcoming schedules a patient can still book into.

        A schedule must have free seats and start beyond the booking cutoff.
        """
        return [
            schedule for schedule in await self.upcoming(location_id, now)
            if has_capacity(schedule.max_appointments, schedule.booked)
            and is_start_time_more_than_hours_ahead(
                schedule.start_time,
                self._booking_cutoff_hours,
                now=now,
                timezone=self._timezone,
            )
        ]
