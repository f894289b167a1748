"""
Application service for turning schedule requests into stored schedules.

The planner expands a request with the domain expanders, checks every
candidate against the doctor's stored schedules at the same location and
only then hands the survivors to the store. The store dependency is typed
as a protocol so tests can pass a stub.

The conflict check and the insert are not atomic; the store is expected to
guard against concurrent inserts if that matters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..domain.clock import DEFAULT_TIMEZONE, to_datetime
from ..domain.exceptions import NoValidSchedulesError
from ..domain.models import DateInterval, ScheduleType, StoredSchedule
from ..domain.overlap import filter_conflicts
from ..domain.schedule_expander import get_monthly_schedule_dates, get_weekly_schedule_dates
from .requests import ScheduleRequest

logger = logging.getLogger(__name__)


class ScheduleStoreProtocol(Protocol):
    """Protocol describing the store behaviour needed by the services."""

    async def find_by_location(
        self,
        location_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[StoredSchedule]:
        """Return stored schedules at a location intersecting the window."""

    async def find_all(self, location_id: Optional[str] = None) -> List[StoredSchedule]:
        """Return stored schedules, optionally for one location."""

    async def create_many(self, rows: Sequence[StoredSchedule]) -> int:
        """Persist rows and return how many were written."""


@dataclass
class SchedulePlan:
    """Outcome of a preview, remove or create action."""
    schedules: List[StoredSchedule]
    created_count: int
    skipped_count: int = 0
    removed_count: int = 0
    message: str = ""


class SchedulePlanner:
    """
    Orchestrates expansion, conflict filtering and persistence.
    """

    def __init__(
        self,
        store: ScheduleStoreProtocol,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self._store = store
        self._timezone = timezone

    def expand(self, request: ScheduleRequest, now: Optional[datetime] = None) -> List[DateInterval]:
        """Expand a request into candidate intervals."""
        if request.schedule_type is ScheduleType.SINGLE_DAY:
            return get_monthly_schedule_dates(
                request.one_day,
                request.start_time,
                request.end_time,
                request.repeat_months,
                timezone=self._timezone,
            )

        return get_weekly_schedule_dates(
            request.weekly_days,
            request.start_time,
            request.end_time,
            request.repeat_weeks,
            now=now,
            timezone=self._timezone,
        )

    async def preview(self, request: ScheduleRequest, now: Optional[datetime] = None) -> SchedulePlan:
        """
        Expand the request and drop candidates clashing with stored schedules.

        Raises:
            NoValidSchedulesError: If the request expands to nothing
        """
        candidates = self._build_rows(request, self.expand(request, now))

        if not candidates:
            raise NoValidSchedulesError("No valid schedules found")

        existing = await self._store.find_by_location(
            request.location_id,
            min(row.start_time for row in candidates),
            max(row.end_time for row in candidates),
        )
        available = filter_conflicts(candidates, existing)
        skipped = len(candidates) - len(available)

        logger.info(
            "Planned %d schedule(s) at %s, %d skipped due to conflicts",
            len(available), request.location_id, skipped,
        )

        return SchedulePlan(
            schedules=available,
            created_count=len(available),
            skipped_count=skipped,
            message=(
                f"Skipped {skipped} schedules due to conflicts."
                if skipped else "No conflicts found."
            ),
        )

    async def remove(
        self,
        request: ScheduleRequest,
        removed_start: datetime | str,
        now: Optional[datetime] = None,
    ) -> SchedulePlan:
        """Preview the request without the candidate starting at ``removed_start``."""
        plan = await self.preview(request, now)
        removed_at = to_datetime(removed_start, self._timezone)

        remaining = [row for row in plan.schedules if row.start_time != removed_at]
        removed = len(plan.schedules) - len(remaining)

        return replace(
            plan,
            schedules=remaining,
            created_count=len(remaining),
            removed_count=removed,
            message=(
                f"Removed 1 schedule from preview. {len(remaining)} schedules remaining."
                if removed else "No matching schedule found to remove."
            ),
        )

    async def create(self, request: ScheduleRequest, now: Optional[datetime] = None) -> SchedulePlan:
        """Preview the request and persist the surviving schedules."""
        plan = await self.preview(request, now)
        created = await self._store.create_many(plan.schedules)
        return replace(plan, created_count=created)

    @staticmethod
    def _build_rows(request: ScheduleRequest, intervals: Sequence[DateInterval]) -> List[StoredSchedule]:
        return [
            StoredSchedule(
                start_time=interval.start_time,
                end_time=interval.end_time,
                location_id=request.location_id,
                doctor_id=request.doctor_id,
                max_appointments=request.max_appointments,
                visit_fee=request.visiting_fee,
                serial_fee=request.serial_fee,
                discount_fee=request.discount,
            )
            for interval in intervals
        ]
