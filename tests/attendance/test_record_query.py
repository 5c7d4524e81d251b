from datetime import date

import pytest

from workforce_attendance.attendance.model import AttendanceRecord
from workforce_attendance.attendance.query import filter_records, sort_records
from workforce_attendance.core.enums import AttendanceStatus
from workforce_attendance.core.exceptions import ValidationError

RECORDS = [
    AttendanceRecord(1, "e1", "Alice", date(2024, 6, 2), AttendanceStatus.ABSENT),
    AttendanceRecord(2, "e2", "Bob", date(2024, 6, 1), AttendanceStatus.PRESENT),
    AttendanceRecord(3, "e3", "Carol", date(2024, 6, 1), AttendanceStatus.ON_LEAVE),
]


def test_filter_by_search_status_and_date():
    assert [r.record_id for r in filter_records(RECORDS, search="CAR")] == [3]
    assert [r.record_id for r in filter_records(RECORDS, status="Present")] == [2]
    assert [r.record_id for r in filter_records(RECORDS, status="all")] == [1, 2, 3]
    assert [r.record_id for r in filter_records(RECORDS, work_date=date(2024, 6, 1))] == [2, 3]


def test_sort_orders():
    assert [r.record_id for r in sort_records(RECORDS, sort_by="date", order="desc")] == [1, 3, 2]
    assert [r.record_id for r in sort_records(RECORDS, sort_by="status", order="asc")] == [2, 1, 3]
    assert [r.record_id for r in sort_records(RECORDS, sort_by="employee", order="asc")] == [1, 2, 3]


def test_sort_rejects_unknown_key():
    with pytest.raises(ValidationError):
        sort_records(RECORDS, sort_by="salary")
    with pytest.raises(ValidationError):
        sort_records(RECORDS, order="sideways")
