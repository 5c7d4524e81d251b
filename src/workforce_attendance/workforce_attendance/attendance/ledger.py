"""Punch ledger: the append-only punch log of a single record."""

from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidPunchSequenceError
from .model import AttendanceRecord, Punch
from .policies.base import PunchPolicy
from .policies.single_session import SingleSessionPolicy


class PunchLedger:
    def __init__(self, policy: Optional[PunchPolicy] = None):
        self._policy = policy or SingleSessionPolicy()

    @property
    def policy(self) -> PunchPolicy:
        return self._policy

    def append(self, record: AttendanceRecord, punch: Punch) -> AttendanceRecord:
        """Return ``record`` with ``punch`` appended, or raise if not allowed.

        Punches only exist on Present days.
        """
        if record.status != AttendanceStatus.PRESENT:
            raise InvalidPunchSequenceError(
                f"{record.employee_id} is marked {record.status.value} on {record.work_date}; punches are not allowed"
            )
        self._policy.check_append(record, punch.punch_type)
        return record.with_changes(punches=record.punches + (punch,))

    @staticmethod
    def open_record(employee_id: str, employee_name: str, work_date) -> AttendanceRecord:
        """Unsaved Present record used when the first punch of the day arrives."""
        return AttendanceRecord(
            record_id=None,
            employee_id=employee_id,
            employee_name=employee_name,
            work_date=work_date,
            status=AttendanceStatus.PRESENT,
        )
