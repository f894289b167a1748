"""
Domain-specific exception hierarchy for the doctor schedule application.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class NoValidSchedulesError(ScheduleError):
    """Raised when a schedule request expands to zero intervals."""


class ScheduleStoreError(ScheduleError):
    """Raised when stored schedules cannot be read or written."""
