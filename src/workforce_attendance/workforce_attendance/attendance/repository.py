from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Persistence collaborator for attendance records.

    Writes are optimistic: ``insert`` fails with ConflictError when the
    (employee_id, work_date) key is taken, ``replace``/``delete`` fail with
    ConflictError when the stored version no longer matches.
    """

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def replace(self, record: AttendanceRecord, *, expected_version: int) -> AttendanceRecord:
        raise NotImplementedError

    def delete(self, record_id: int, *, expected_version: Optional[int] = None) -> bool:
        raise NotImplementedError
