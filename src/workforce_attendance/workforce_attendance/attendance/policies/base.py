from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import PunchType
from ...core.exceptions import InvalidPunchSequenceError
from ..model import AttendanceRecord


class PunchPolicy(ABC):
    """Strategy Pattern: decide whether a punch may be appended to a record."""

    name: str = ""

    def expected_type(self, record: AttendanceRecord) -> PunchType:
        last = record.last_punch
        if last is None or last.punch_type == PunchType.OUT:
            return PunchType.IN
        return PunchType.OUT

    def check_sequence(self, record: AttendanceRecord, punch_type: PunchType) -> None:
        expected = self.expected_type(record)
        if punch_type != expected:
            raise InvalidPunchSequenceError(
                f"Expected a {expected.value} punch for {record.employee_id} on {record.work_date}, "
                f"got {punch_type.value}"
            )

    @abstractmethod
    def check_append(self, record: AttendanceRecord, punch_type: PunchType) -> None:
        raise NotImplementedError
