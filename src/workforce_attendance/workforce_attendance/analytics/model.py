from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class TrendPoint:
    month: int
    year: int
    present: int = 0
    absent: int = 0
    on_leave: int = 0


@dataclass(frozen=True)
class StatusCount:
    status: AttendanceStatus
    count: int


@dataclass(frozen=True)
class EmployeeCount:
    employee_id: str
    employee_name: str
    count: int


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Read-model for the attendance dashboard."""

    trend: list[TrendPoint] = field(default_factory=list)
    status_breakdown: list[StatusCount] = field(default_factory=list)
    top_attendance: list[EmployeeCount] = field(default_factory=list)
    most_punctual: Optional[EmployeeCount] = None
    least_punctual: Optional[EmployeeCount] = None
    total_attendance: int = 0
    total_punches_today: int = 0
    total_punches_this_month: int = 0
    avg_punches_per_employee: float = 0.0
