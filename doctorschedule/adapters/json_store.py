"""
File-backed schedule store.

Keeps every schedule row in a single JSON list. It stands in for the real
database: there is no locking, so concurrent writers can lose rows.
"""

import json
import logging
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pendulum import DateTime

from ..domain.clock import DEFAULT_TIMEZONE, to_datetime
from ..domain.exceptions import ScheduleStoreError
from ..domain.models import StoredSchedule

logger = logging.getLogger(__name__)


class JsonScheduleStore:
    """
    Schedule store reading and writing a JSON file.

    Example file content:
        [{"id": "...", "doctor_id": "dr-house", "location_id": "main",
          "start_time": "2024-11-25T09:00:00+01:00",
          "end_time": "2024-11-25T12:00:00+01:00", "max_appointments": 8}]
    """

    def __init__(self, path: Path, timezone: str = DEFAULT_TIMEZONE):
        """
        Initialize the store.

        Args:
            path: JSON file holding the rows; a missing file is an empty store
            timezone: IANA timezone rows are converted into when loaded
        """
        self.path = Path(path)
        self.timezone = timezone

    async def find_by_location(
        self,
        location_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[StoredSchedule]:
        """Return stored schedules at ``location_id`` intersecting the window."""
        return [
            schedule for schedule in self.load()
            if schedule.location_id == location_id
            and schedule.start_time < end_time
            and schedule.end_time > start_time
        ]

    async def find_all(self, location_id: str | None = None) -> List[StoredSchedule]:
        """Return all stored schedules, optionally for one location."""
        schedules = self.load()
        if location_id is None:
            return schedules
        return [schedule for schedule in schedules if schedule.location_id == location_id]

    async def create_many(self, rows: Sequence[StoredSchedule]) -> int:
        """Append ``rows`` to the file and return how many were written."""
        if not rows:
            return 0

        records = self._read_records()
        for row in rows:
            records.append(self._serialize(row))

        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
        except OSError as exc:
            raise ScheduleStoreError(f"Could not write schedules to {self.path}: {exc}") from exc

        logger.debug("Stored %d schedule(s) in %s", len(rows), self.path)
        return len(rows)

    def load(self) -> List[StoredSchedule]:
        """Load every valid row; malformed rows are skipped with a warning."""
        schedules: List[StoredSchedule] = []

        for record in self._read_records():
            if not isinstance(record, dict):
                logger.warning("Skipping schedule row that is not an object: %r", record)
                continue
            try:
                schedules.append(self._deserialize(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid schedule row %r: %s", record, exc)

        return schedules

    def _read_records(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ScheduleStoreError(f"Could not read schedules from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise ScheduleStoreError(f"Schedule file {self.path} must contain a JSON list.")

        return data

    def _deserialize(self, record: Dict[str, Any]) -> StoredSchedule:
        return StoredSchedule(
            id=str(record.get("id") or ""),
            doctor_id=str(record.get("doctor_id", "")),
            location_id=str(record["location_id"]),
            start_time=to_datetime(record["start_time"], self.timezone),
            end_time=to_datetime(record["end_time"], self.timezone),
            max_appointments=int(record.get("max_appointments", 1)),
            visit_fee=float(record.get("visit_fee", 0.0)),
            serial_fee=float(record.get("serial_fee", 0.0)),
            discount_fee=record.get("discount_fee"),
            booked=int(record.get("booked", 0)),
        )

    @staticmethod
    def _serialize(row: StoredSchedule) -> Dict[str, Any]:
        record = asdict(row)
        record["id"] = row.id or str(uuid.uuid4())
        record["start_time"] = row.start_time.isoformat()
        record["end_time"] = row.end_time.isoformat()
        return record
