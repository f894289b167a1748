"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService
from .requests import ScheduleRequest
from .schedule_planner import SchedulePlan, SchedulePlanner, ScheduleStoreProtocol

__all__ = [
    "AvailabilityService",
    "SchedulePlan",
    "SchedulePlanner",
    "ScheduleRequest",
    "ScheduleStoreProtocol",
]
