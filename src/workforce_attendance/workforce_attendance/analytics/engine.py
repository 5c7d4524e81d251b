from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import to_day
from ..core.constants import DEFAULT_TOP_ATTENDANCE_LIMIT
from ..core.enums import STATUS_PRIORITY, AttendanceStatus, PunchType
from .model import AnalyticsSnapshot, EmployeeCount, StatusCount, TrendPoint

_TREND_FIELDS = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.ON_LEAVE: "on_leave",
}


def _trend(records: list[AttendanceRecord]) -> list[TrendPoint]:
    buckets: dict[tuple[int, int], Counter] = {}
    for r in records:
        day = to_day(r.work_date)
        buckets.setdefault((day.year, day.month), Counter())[_TREND_FIELDS[r.status]] += 1

    return [
        TrendPoint(month=month, year=year, **buckets[(year, month)])
        for year, month in sorted(buckets)
    ]


def _status_breakdown(records: list[AttendanceRecord]) -> list[StatusCount]:
    tally = Counter(r.status for r in records)
    return [StatusCount(status=s, count=tally[s]) for s in STATUS_PRIORITY if tally[s]]


def punctuality_ranking(records: Iterable[AttendanceRecord]) -> list[EmployeeCount]:
    """IN-punch count per employee with at least one record, highest first.

    Ties go to the smaller employee id.
    """
    names: dict[str, str] = {}
    counts: Counter = Counter()
    for r in records:
        names.setdefault(r.employee_id, r.employee_name)
        counts[r.employee_id] += r.count(PunchType.IN)

    ranking = [EmployeeCount(employee_id=e, employee_name=names[e], count=counts[e]) for e in names]
    ranking.sort(key=lambda c: (-c.count, c.employee_id))
    return ranking


def compute(
    records: Iterable[AttendanceRecord],
    as_of: datetime,
    *,
    top_limit: int = DEFAULT_TOP_ATTENDANCE_LIMIT,
) -> AnalyticsSnapshot:
    """Dashboard figures over ``records``; an empty input gives a zero snapshot."""
    records = list(records)
    today = to_day(as_of)

    ranking = punctuality_ranking(records)
    least = min(ranking, key=lambda c: (c.count, c.employee_id)) if ranking else None

    punches_today = 0
    punches_month = 0
    month_employees: set[str] = set()
    for r in records:
        day = to_day(r.work_date)
        if day == today:
            punches_today += len(r.punches)
        if (day.year, day.month) == (today.year, today.month):
            punches_month += len(r.punches)
            month_employees.add(r.employee_id)

    return AnalyticsSnapshot(
        trend=_trend(records),
        status_breakdown=_status_breakdown(records),
        top_attendance=ranking[:top_limit],
        most_punctual=ranking[0] if ranking else None,
        least_punctual=least,
        total_attendance=len(records),
        total_punches_today=punches_today,
        total_punches_this_month=punches_month,
        avg_punches_per_employee=punches_month / len(month_employees) if month_employees else 0.0,
    )
