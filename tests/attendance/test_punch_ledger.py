from datetime import date, datetime

import pytest

from workforce_attendance.attendance.factory import PunchPolicyFactory
from workforce_attendance.attendance.ledger import PunchLedger
from workforce_attendance.attendance.model import AttendanceRecord, Punch
from workforce_attendance.attendance.policies.multi_session import MultiSessionPolicy
from workforce_attendance.attendance.policies.single_session import SingleSessionPolicy
from workforce_attendance.core.enums import AttendanceStatus, PunchType
from workforce_attendance.core.exceptions import (
    InvalidPunchSequenceError,
    SessionAlreadyClosedError,
    ValidationError,
)

DAY = date(2024, 6, 1)


def _punch(kind: PunchType, hour: int) -> Punch:
    return Punch(punch_type=kind, timestamp=datetime(2024, 6, 1, hour, 0))


def _record(status=AttendanceStatus.PRESENT) -> AttendanceRecord:
    return AttendanceRecord(record_id=1, employee_id="e1", employee_name="Alice", work_date=DAY, status=status)


def test_first_punch_must_be_in():
    with pytest.raises(InvalidPunchSequenceError):
        PunchLedger().append(_record(), _punch(PunchType.OUT, 9))


def test_in_then_out_then_session_closed():
    ledger = PunchLedger()
    rec = ledger.append(_record(), _punch(PunchType.IN, 9))
    rec = ledger.append(rec, _punch(PunchType.OUT, 17))

    assert [p.punch_type for p in rec.punches] == [PunchType.IN, PunchType.OUT]
    with pytest.raises(SessionAlreadyClosedError):
        ledger.append(rec, _punch(PunchType.IN, 18))


def test_two_ins_in_a_row_rejected():
    ledger = PunchLedger()
    rec = ledger.append(_record(), _punch(PunchType.IN, 9))
    with pytest.raises(InvalidPunchSequenceError):
        ledger.append(rec, _punch(PunchType.IN, 10))


def test_append_does_not_mutate_original():
    original = _record()
    PunchLedger().append(original, _punch(PunchType.IN, 9))
    assert original.punches == ()


@pytest.mark.parametrize("status", [AttendanceStatus.ABSENT, AttendanceStatus.ON_LEAVE])
def test_punch_rejected_when_not_present(status):
    with pytest.raises(InvalidPunchSequenceError):
        PunchLedger().append(_record(status), _punch(PunchType.IN, 9))


def test_multi_session_allows_second_pair_but_keeps_alternation():
    ledger = PunchLedger(MultiSessionPolicy())
    rec = _record()
    for kind, hour in [(PunchType.IN, 8), (PunchType.OUT, 12), (PunchType.IN, 13), (PunchType.OUT, 17)]:
        rec = ledger.append(rec, _punch(kind, hour))

    assert len(rec.punches) == 4
    with pytest.raises(InvalidPunchSequenceError):
        ledger.append(rec, _punch(PunchType.OUT, 18))


def test_policy_factory():
    factory = PunchPolicyFactory()
    assert isinstance(factory.for_name(None), SingleSessionPolicy)
    assert isinstance(factory.for_name("Multi"), MultiSessionPolicy)
    with pytest.raises(ValidationError):
        factory.for_name("shifts")
