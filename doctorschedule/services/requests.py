"""
Validation of incoming schedule requests.

This is the boundary where bad doctor input becomes a pydantic
``ValidationError``. The expanders behind it still just return [].
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from ..domain.clock import DEFAULT_TIMEZONE, resolve_now, to_civil_date
from ..domain.models import ScheduleType, Weekday
from ..domain.time_parsing import is_valid_time, parse_time


class ScheduleRequest(BaseModel):
    """
    A doctor's availability declaration as submitted from the schedule form.

    Pass ``context={"now": ..., "timezone": ...}`` to ``model_validate`` to
    pin the date used for the "not in the past" check.
    """
    location_id: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    schedule_type: ScheduleType
    one_day: Optional[date] = None
    weekly_days: List[str] = Field(default_factory=list)
    start_time: str
    end_time: str
    max_appointments: int = Field(gt=0)
    repeat_weeks: bool = False
    repeat_months: bool = False
    visiting_fee: float = Field(default=0.0, ge=0)
    serial_fee: float = Field(default=0.0, ge=0)
    discount: Optional[float] = Field(default=None, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not is_valid_time(value):
            raise ValueError(f"Time must be formatted as HH:MM, got {value!r}")
        return value

    @field_validator("weekly_days")
    @classmethod
    def validate_weekly_days(cls, value: List[str]) -> List[str]:
        """Normalise day names and reject unknown ones."""
        days: List[str] = []
        for name in value:
            weekday = Weekday.from_name(name)
            if weekday is None:
                raise ValueError(f"Unknown day name: {name!r}")
            days.append(weekday.name.lower())
        return days

    @model_validator(mode="after")
    def validate_schedule(self, info: ValidationInfo) -> "ScheduleRequest":
        """Cross-field checks that depend on the schedule type."""
        if parse_time(self.start_time) > parse_time(self.end_time):
            raise ValueError("Start time must be before the End time")

        if self.schedule_type is ScheduleType.SINGLE_DAY:
            if self.one_day is None:
                raise ValueError("Select a date for the schedule")

            context = info.context or {}
            timezone = context.get("timezone", DEFAULT_TIMEZONE)
            today = to_civil_date(resolve_now(context.get("now"), timezone), timezone)
            if self.one_day < today:
                raise ValueError("Select a future date")

        elif not self.weekly_days:
            raise ValueError("Select at least one day for the schedule")

        return self

    @property
    def repeat(self) -> bool:
        """Repeat flag for the active schedule type."""
        if self.schedule_type is ScheduleType.SINGLE_DAY:
            return self.repeat_months
        return self.repeat_weeks
