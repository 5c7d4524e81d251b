from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Sequence

from ..common.datetime_utils import to_day
from ..employees.model import Employee
from .model import AttendanceRecord, MergedRow


def merge_for_date(
    roster: Iterable[Employee],
    records: Iterable[AttendanceRecord],
    work_date: date | datetime,
) -> list[MergedRow]:
    """One row per active employee, in roster order, with that day's record.

    Employees without a record get ``record=None`` (shown as "Not Marked").
    Records for other days or for employees outside the roster are ignored.
    """
    day = to_day(work_date)

    by_employee: dict[str, AttendanceRecord] = {}
    for r in records:
        if to_day(r.work_date) == day:
            by_employee.setdefault(r.employee_id, r)

    return [
        MergedRow(employee=e, work_date=day, record=by_employee.get(e.employee_id))
        for e in roster
        if e.is_active
    ]


def unmarked(rows: Sequence[MergedRow]) -> list[Employee]:
    return [row.employee for row in rows if row.record is None]
