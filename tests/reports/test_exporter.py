from datetime import date, datetime

import pytest

from workforce_attendance.attendance.model import AttendanceRecord, MergedRow, Punch
from workforce_attendance.core.enums import AttendanceStatus, PunchType
from workforce_attendance.core.exceptions import ValidationError
from workforce_attendance.employees.model import Employee
from workforce_attendance.reports.exporter import export
from workforce_attendance.reports.service import ReportService

DAY = date(2024, 6, 1)


def _rows() -> list[MergedRow]:
    alice = Employee("e1", "Alice")
    bob = Employee("e2", "Bob")
    present = AttendanceRecord(
        1,
        "e1",
        "Alice",
        DAY,
        AttendanceStatus.PRESENT,
        (Punch(PunchType.IN, datetime(2024, 6, 1, 9, 0)), Punch(PunchType.OUT, datetime(2024, 6, 1, 17, 0))),
    )
    absent = AttendanceRecord(2, "e2", "Bob", DAY, AttendanceStatus.ABSENT)
    return [MergedRow(alice, DAY, present), MergedRow(bob, DAY, absent)]


def test_export_header_and_rows():
    lines = export(_rows(), DAY).decode("utf-8").splitlines()

    assert lines == [
        "Employee,Date,Status,In Time,Out Time",
        "Alice,2024-06-01,Present,09:00:00,17:00:00",
        "Bob,2024-06-01,Absent,,",
    ]


def test_in_time_is_first_in_and_out_time_is_last_out():
    record = AttendanceRecord(
        1,
        "e1",
        "Alice",
        DAY,
        AttendanceStatus.PRESENT,
        (
            Punch(PunchType.IN, datetime(2024, 6, 1, 8, 0)),
            Punch(PunchType.OUT, datetime(2024, 6, 1, 12, 0)),
            Punch(PunchType.IN, datetime(2024, 6, 1, 13, 0)),
            Punch(PunchType.OUT, datetime(2024, 6, 1, 17, 30)),
        ),
    )

    line = export([MergedRow(Employee("e1", "Alice"), DAY, record)]).decode("utf-8").splitlines()[1]

    assert line == "Alice,2024-06-01,Present,08:00:00,17:30:00"


def test_values_with_commas_are_quoted_and_unmarked_rows_included():
    rows = [MergedRow(Employee("e1", "Doe, Jane"), DAY, None)]

    lines = export(rows, DAY).decode("utf-8").splitlines()

    assert lines[1] == '"Doe, Jane",2024-06-01,Not Marked,,'


def test_empty_rows_give_header_only():
    assert export([], DAY) == b"Employee,Date,Status,In Time,Out Time\n"


def test_unknown_format_rejected():
    with pytest.raises(ValidationError):
        export(_rows(), DAY, "xlsx")


def test_report_service_daily_export(service):
    service.append_punch("e1", DAY, PunchType.IN)

    export_file = ReportService(service).daily_export("2024-06-01")

    assert export_file.filename == "attendance_2024-06-01.csv"
    assert export_file.mimetype == "text/csv"
    lines = export_file.content.decode("utf-8").splitlines()
    assert len(lines) == 1 + 3
    assert lines[1] == "Alice,2024-06-01,Present,09:00:00,"
