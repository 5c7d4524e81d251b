from datetime import date, datetime

import pytest

from workforce_attendance.attendance.model import AttendanceRecord
from workforce_attendance.calendar_view.aggregator import aggregate, calendar_events
from workforce_attendance.calendar_view.service import CalendarService
from workforce_attendance.core.enums import AttendanceStatus as S
from workforce_attendance.core.exceptions import ValidationError

JUNE_3 = date(2024, 6, 3)


def _rec(record_id, employee_id, status, day=JUNE_3):
    return AttendanceRecord(record_id, employee_id, employee_id.title(), day, status)


def test_one_of_each_status():
    records = [_rec(1, "alice", S.PRESENT), _rec(2, "bob", S.ABSENT), _rec(3, "carol", S.ON_LEAVE)]

    [summary] = aggregate(records, date(2024, 6, 1), date(2024, 6, 30))

    assert summary.work_date == JUNE_3
    assert summary.status_counts == {S.PRESENT: 1, S.ABSENT: 1, S.ON_LEAVE: 1}
    assert summary.dominant_status == S.PRESENT
    assert summary.summary == "1 Present, 1 Absent, 1 On Leave"
    assert set(summary.records_by_employee) == {"alice", "bob", "carol"}


def test_summary_lists_highest_count_first():
    records = [_rec(1, "a", S.ON_LEAVE), _rec(2, "b", S.ABSENT), _rec(3, "c", S.ABSENT), _rec(4, "d", S.PRESENT)]

    [summary] = aggregate(records, JUNE_3, JUNE_3)

    assert summary.dominant_status == S.ABSENT
    assert summary.summary == "2 Absent, 1 Present, 1 On Leave"


def test_tie_between_absent_and_on_leave_goes_to_absent():
    records = [_rec(1, "a", S.ON_LEAVE), _rec(2, "b", S.ABSENT)]
    assert aggregate(records, JUNE_3, JUNE_3)[0].dominant_status == S.ABSENT


def test_timestamps_are_truncated_to_the_day_and_range_is_inclusive():
    records = [
        _rec(1, "a", S.PRESENT, day=datetime(2024, 6, 3, 8, 30)),
        _rec(2, "b", S.PRESENT, day=datetime(2024, 6, 3, 22, 15)),
        _rec(3, "c", S.ABSENT, day=date(2024, 6, 30)),
        _rec(4, "d", S.ABSENT, day=date(2024, 7, 1)),
    ]

    summaries = aggregate(records, date(2024, 6, 1), datetime(2024, 6, 30, 0, 0))

    assert [s.work_date for s in summaries] == [JUNE_3, date(2024, 6, 30)]
    assert summaries[0].status_counts == {S.PRESENT: 2}


def test_aggregate_is_repeatable_and_conserves_counts():
    records = [_rec(i, f"e{i}", status, day=date(2024, 6, 1 + i % 3)) for i, status in enumerate([S.PRESENT, S.ABSENT, S.ON_LEAVE] * 4)]

    first = aggregate(records, date(2024, 6, 1), date(2024, 6, 30))
    second = aggregate(records, date(2024, 6, 1), date(2024, 6, 30))

    assert first == second
    for summary in first:
        assert summary.total == sum(1 for r in records if r.work_date == summary.work_date)


def test_empty_input_gives_no_summaries():
    assert aggregate([], date(2024, 6, 1), date(2024, 6, 30)) == []


def test_calendar_events_titles():
    [event] = calendar_events([_rec(7, "alice", S.ON_LEAVE)])
    assert event.title == "Alice (On Leave)"
    assert event.all_day
    assert event.start == event.end == JUNE_3


def test_calendar_service_views(service, repo):
    service.quick_mark("e1", "Alice", "2024-06-03", "Present")
    service.quick_mark("e2", "Bob", "2024-06-03", "Absent")
    service.quick_mark("e1", "Alice", "2024-06-10", "Absent")

    calendar = CalendarService(repo)

    assert [s.work_date.day for s in calendar.month_view(2024, 6)] == [3, 10]
    assert [s.work_date.day for s in calendar.week_view("2024-06-05")] == [3]
    assert len(calendar.events("2024-06-01", "2024-06-30")) == 3
    with pytest.raises(ValidationError):
        calendar.summaries("2024-06-30", "2024-06-01")
    with pytest.raises(ValidationError):
        calendar.month_view(2024, 13)


def test_month_view_rejects_out_of_range_year(repo):
    with pytest.raises(ValidationError):
        CalendarService(repo).month_view(0, 6)
