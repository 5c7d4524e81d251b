from datetime import date, datetime

import pytest

from workforce_attendance.common.datetime_utils import month_range, to_day, week_range
from workforce_attendance.common.locks import KeyedLock
from workforce_attendance.common.validators import coerce_date, coerce_punch_type, coerce_status, optional_text
from workforce_attendance.core.enums import AttendanceStatus, PunchType
from workforce_attendance.core.exceptions import AttendanceTimeoutError, ValidationError


def test_keyed_lock_times_out_on_held_key():
    locks = KeyedLock(timeout=0.05)

    with locks.hold(("e1", date(2024, 6, 1))):
        with pytest.raises(AttendanceTimeoutError):
            with locks.hold(("e1", date(2024, 6, 1))):
                pass
        # Other keys are independent.
        with locks.hold(("e2", date(2024, 6, 1))):
            pass

    assert len(locks) == 0


def test_keyed_lock_hold_many_releases_everything():
    locks = KeyedLock(timeout=0.05)
    with locks.hold_many(["b", "a", "a"]):
        assert len(locks) == 2
    assert len(locks) == 0


def test_coerce_date():
    assert coerce_date("2024-06-01") == date(2024, 6, 1)
    assert coerce_date("2024-06-01T23:10:00") == date(2024, 6, 1)
    assert coerce_date(datetime(2024, 6, 1, 5)) == date(2024, 6, 1)
    with pytest.raises(ValidationError):
        coerce_date(None)


def test_coerce_status_and_punch_type():
    assert coerce_status("present") is AttendanceStatus.PRESENT
    assert coerce_status("On Leave") is AttendanceStatus.ON_LEAVE
    assert coerce_punch_type("out") is PunchType.OUT
    with pytest.raises(ValidationError):
        coerce_punch_type("BREAK")
    with pytest.raises(ValidationError):
        coerce_status(3)


def test_ranges():
    assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert week_range(date(2024, 6, 5)) == (date(2024, 6, 3), date(2024, 6, 9))
    assert to_day(date(2024, 6, 5)) == date(2024, 6, 5)


def test_optional_text():
    assert optional_text(None, "Note") is None
    assert optional_text("   ", "Note") is None
    assert optional_text("  late bus ", "Note") == "late bus"
    with pytest.raises(ValidationError):
        optional_text(5, "Note")
