"""Filtering and sorting for attendance listings."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import to_day
from ..common.validators import coerce_status
from ..core.enums import STATUS_PRIORITY, AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord

SORT_KEYS = {
    "date": lambda r: (to_day(r.work_date), r.employee_name.lower()),
    "status": lambda r: (STATUS_PRIORITY.index(r.status), r.employee_name.lower()),
    "employee": lambda r: (r.employee_name.lower(), to_day(r.work_date)),
}


def filter_records(
    records: Iterable[AttendanceRecord],
    *,
    search: Optional[str] = None,
    status: Optional[AttendanceStatus | str] = None,
    work_date: Optional[date] = None,
) -> list[AttendanceRecord]:
    needle = search.strip().lower() if search else ""
    wanted = coerce_status(status) if status not in (None, "", "all") else None
    day = to_day(work_date) if work_date else None

    out = []
    for r in records:
        if needle and needle not in (r.employee_name or "").lower():
            continue
        if wanted is not None and r.status != wanted:
            continue
        if day is not None and to_day(r.work_date) != day:
            continue
        out.append(r)
    return out


def sort_records(
    records: Iterable[AttendanceRecord],
    *,
    sort_by: str = "date",
    order: str = "desc",
) -> list[AttendanceRecord]:
    key = SORT_KEYS.get(sort_by)
    if key is None:
        raise ValidationError(f"Cannot sort by {sort_by!r}")
    if order not in ("asc", "desc"):
        raise ValidationError(f"Sort order must be 'asc' or 'desc', got {order!r}")
    return sorted(records, key=key, reverse=order == "desc")
