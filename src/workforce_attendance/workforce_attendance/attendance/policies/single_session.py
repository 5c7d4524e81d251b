from __future__ import annotations

from ...core.enums import PunchType
from ...core.exceptions import SessionAlreadyClosedError
from ..model import AttendanceRecord
from .base import PunchPolicy


class SingleSessionPolicy(PunchPolicy):
    """One IN and one OUT per day; the session is closed after both."""

    name = "single"

    def check_append(self, record: AttendanceRecord, punch_type: PunchType) -> None:
        if record.count(PunchType.IN) >= 1 and record.count(PunchType.OUT) >= 1:
            raise SessionAlreadyClosedError(
                f"{record.employee_id} already punched in and out on {record.work_date}"
            )
        self.check_sequence(record, punch_type)
