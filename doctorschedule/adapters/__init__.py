"""
Adapters layer - Storage integrations.
"""

from .json_store import JsonScheduleStore

__all__ = ["JsonScheduleStore"]
