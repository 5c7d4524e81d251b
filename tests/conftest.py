from __future__ import annotations

from datetime import datetime

import pytest

from workforce_attendance.attendance.memory_repository import InMemoryAttendanceRepository
from workforce_attendance.attendance.service import AttendanceService
from workforce_attendance.common.locks import KeyedLock
from workforce_attendance.employees.model import Employee
from workforce_attendance.employees.repository import StaticRoster


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def employees() -> list[Employee]:
    return [
        Employee(employee_id="e1", name="Alice"),
        Employee(employee_id="e2", name="Bob"),
        Employee(employee_id="e3", name="Carol"),
        Employee(employee_id="e9", name="Former", is_active=False),
    ]


@pytest.fixture
def roster(employees) -> StaticRoster:
    return StaticRoster(employees)


@pytest.fixture
def repo() -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository()


@pytest.fixture
def service(repo, roster, clock) -> AttendanceService:
    return AttendanceService(repo, roster, clock=clock, locks=KeyedLock(timeout=1.0))
