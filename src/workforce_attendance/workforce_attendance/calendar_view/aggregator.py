from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import to_day
from ..core.enums import STATUS_PRIORITY, AttendanceStatus


@dataclass(frozen=True)
class DaySummary:
    """Derived view of all records on one calendar day."""

    work_date: date
    records_by_employee: dict[str, AttendanceRecord]
    status_counts: dict[AttendanceStatus, int]
    dominant_status: Optional[AttendanceStatus]
    summary: str

    @property
    def total(self) -> int:
        return sum(self.status_counts.values())


@dataclass(frozen=True)
class CalendarEvent:
    """All-day calendar entry for a single record."""

    record_id: Optional[int]
    title: str
    start: date
    end: date
    all_day: bool
    record: AttendanceRecord


def _rank(status: AttendanceStatus) -> int:
    # Statuses outside the priority list sort last.
    return STATUS_PRIORITY.index(status) if status in STATUS_PRIORITY else len(STATUS_PRIORITY)


def summarize_day(work_date: date, records: list[AttendanceRecord]) -> DaySummary:
    tally = Counter(r.status for r in records)
    ordered = sorted(tally.items(), key=lambda kv: (-kv[1], _rank(kv[0])))

    by_employee: dict[str, AttendanceRecord] = {}
    for r in records:
        by_employee.setdefault(r.employee_id, r)

    return DaySummary(
        work_date=work_date,
        records_by_employee=by_employee,
        status_counts={status: count for status, count in sorted(tally.items(), key=lambda kv: _rank(kv[0]))},
        dominant_status=ordered[0][0] if ordered else None,
        summary=", ".join(f"{count} {status.value}" for status, count in ordered),
    )


def aggregate(
    records: Iterable[AttendanceRecord],
    range_start: date | datetime,
    range_end: date | datetime,
) -> list[DaySummary]:
    """Group records by day within [range_start, range_end], oldest day first.

    Pure: the same input always yields the same summaries.
    """
    start, end = to_day(range_start), to_day(range_end)

    groups: dict[date, list[AttendanceRecord]] = {}
    for r in records:
        day = to_day(r.work_date)
        if start <= day <= end:
            groups.setdefault(day, []).append(r)

    return [summarize_day(day, groups[day]) for day in sorted(groups)]


def calendar_events(records: Iterable[AttendanceRecord]) -> list[CalendarEvent]:
    events = []
    for r in records:
        day = to_day(r.work_date)
        events.append(
            CalendarEvent(
                record_id=r.record_id,
                title=f"{r.employee_name} ({r.status.value})",
                start=day,
                end=day,
                all_day=True,
                record=r,
            )
        )
    return events
