"""
Conflict detection between a doctor's stored and proposed schedules.
"""

from typing import Iterable, List, Sequence, TypeVar

from .models import LocatedInterval

T = TypeVar("T", bound=LocatedInterval)


def is_overlapping(existing: LocatedInterval, candidate: LocatedInterval) -> bool:
    """
    Check whether ``candidate`` clashes with ``existing``.

    Schedules at different locations never clash. At the same location the
    check is half-open: a candidate starting exactly when the existing one
    ends is fine, and zero-length schedules never clash.
    """
    if existing.location_id != candidate.location_id:
        return False

    return existing.overlaps(candidate)


def filter_conflicts(candidates: Iterable[T], existing: Sequence[LocatedInterval]) -> List[T]:
    """Keep only the candidates that clash with none of ``existing``."""
    return [
        candidate for candidate in candidates
        if not any(is_overlapping(stored, candidate) for stored in existing)
    ]
