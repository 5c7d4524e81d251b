from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

from ..core.constants import NOT_MARKED_LABEL
from ..core.enums import AttendanceStatus, PunchType
from ..employees.model import Employee


@dataclass(frozen=True)
class Punch:
    """A single clock event. Immutable once recorded."""

    punch_type: PunchType
    timestamp: datetime
    note: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day.

    ``punches`` keeps insertion order. ``version`` increments on every write
    and backs the repositories' optimistic checks.
    """

    record_id: Optional[int]
    employee_id: str
    employee_name: str
    work_date: date
    status: AttendanceStatus
    punches: tuple[Punch, ...] = ()
    version: int = 1

    @property
    def key(self) -> tuple[str, date]:
        return self.employee_id, self.work_date

    @property
    def last_punch(self) -> Optional[Punch]:
        return self.punches[-1] if self.punches else None

    def count(self, punch_type: PunchType) -> int:
        return sum(1 for p in self.punches if p.punch_type == punch_type)

    def first_in(self) -> Optional[Punch]:
        return next((p for p in self.punches if p.punch_type == PunchType.IN), None)

    def last_out(self) -> Optional[Punch]:
        return next((p for p in reversed(self.punches) if p.punch_type == PunchType.OUT), None)

    def with_changes(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class MergedRow:
    """Roster row for a day: the employee plus their record, if any."""

    employee: Employee
    work_date: date
    record: Optional[AttendanceRecord] = None

    @property
    def status_label(self) -> str:
        return self.record.status.value if self.record else NOT_MARKED_LABEL

    @property
    def can_punch(self) -> bool:
        return self.record is None or self.record.status == AttendanceStatus.PRESENT


@dataclass(frozen=True)
class BulkPunchResult:
    succeeded: list[AttendanceRecord] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
