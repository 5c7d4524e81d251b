from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import ConflictError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store.

    Records are immutable values, so a reader holding one never sees a later
    write half applied.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._by_key: dict[tuple[str, date], int] = {}
        self._next_id = 0

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_id.get(int(record_id))

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            record_id = self._by_key.get((employee_id, work_date))
            return self._by_id.get(record_id) if record_id is not None else None

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [
                r
                for r in self._by_id.values()
                if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == employee_id)
            ]
        items.sort(key=lambda r: (r.work_date, r.record_id))
        return items

    def list_all(self) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = list(self._by_id.values())
        items.sort(key=lambda r: (r.work_date, r.record_id))
        return items

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            if record.key in self._by_key:
                raise ConflictError(
                    f"Attendance record already exists for {record.employee_id} on {record.work_date}"
                )
            self._next_id += 1
            stored = record.with_changes(record_id=self._next_id, version=1)
            self._by_id[stored.record_id] = stored
            self._by_key[stored.key] = stored.record_id
            return stored

    def replace(self, record: AttendanceRecord, *, expected_version: int) -> AttendanceRecord:
        with self._lock:
            current = self._by_id.get(int(record.record_id))
            if current is None or current.version != expected_version:
                logger.warning("Stale write rejected for record %s", record.record_id)
                raise ConflictError(f"Attendance record {record.record_id} was modified concurrently")
            if record.key != current.key:
                if record.key in self._by_key:
                    raise ConflictError(
                        f"Attendance record already exists for {record.employee_id} on {record.work_date}"
                    )
                del self._by_key[current.key]
            stored = record.with_changes(version=current.version + 1)
            self._by_id[stored.record_id] = stored
            self._by_key[stored.key] = stored.record_id
            return stored

    def delete(self, record_id: int, *, expected_version: Optional[int] = None) -> bool:
        with self._lock:
            current = self._by_id.get(int(record_id))
            if current is None:
                return False
            if expected_version is not None and current.version != expected_version:
                raise ConflictError(f"Attendance record {record_id} was modified concurrently")
            del self._by_id[current.record_id]
            del self._by_key[current.key]
            return True
