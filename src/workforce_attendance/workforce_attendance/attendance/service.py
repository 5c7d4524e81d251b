from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.cancellation import check_cancelled
from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..common.validators import (
    coerce_date,
    coerce_punch_type,
    coerce_status,
    optional_text,
    require_employee_id,
    require_non_empty,
)
from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import (
    AlreadyMarkedError,
    ConflictError,
    DomainError,
    InvalidPunchSequenceError,
    NotFoundError,
    OperationCancelledError,
    SessionAlreadyClosedError,
)
from ..employees.model import Employee
from ..employees.repository import RosterProvider
from .ledger import PunchLedger
from .merge import merge_for_date, unmarked
from .model import AttendanceRecord, BulkPunchResult, MergedRow, Punch
from .query import filter_records, sort_records
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: quick-mark, punch, correct and delete day records.

    Writes to the same (employee_id, work_date) are serialized through a
    keyed lock; the repository's version check catches writers in other
    processes. Nothing is written once ``cancel`` is set.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        roster: RosterProvider,
        *,
        ledger: PunchLedger | None = None,
        clock: Callable[[], datetime] = now_local,
        locks: KeyedLock | None = None,
    ):
        self._attendance = attendance
        self._roster = roster
        self._ledger = ledger or PunchLedger()
        self._clock = clock
        self._locks = locks or KeyedLock(timeout=DEFAULT_LOCK_TIMEOUT_SECONDS)

    def _resolve_name(self, employee_id: str, employee_name: Optional[str]) -> str:
        name = optional_text(employee_name, "Employee name")
        if name:
            return name
        employee = self._roster.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee.name

    # region Writes
    def quick_mark(
        self,
        employee_id: str,
        employee_name: Optional[str],
        work_date: date | str,
        status: AttendanceStatus | str,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> AttendanceRecord:
        employee_id = require_employee_id(employee_id)
        day = coerce_date(work_date)
        status = coerce_status(status)
        name = self._resolve_name(employee_id, employee_name)

        with self._locks.hold((employee_id, day)):
            if self._attendance.get_for_employee_and_date(employee_id, day):
                logger.warning("Quick-mark rejected: %s already marked on %s", employee_id, day)
                raise AlreadyMarkedError(f"{name} is already marked for {day}")

            check_cancelled(cancel, "quick_mark")
            record = self._attendance.insert(
                AttendanceRecord(
                    record_id=None,
                    employee_id=employee_id,
                    employee_name=name,
                    work_date=day,
                    status=status,
                )
            )

        logger.info("Marked %s %s on %s (record %s)", employee_id, status.value, day, record.record_id)
        return record

    def append_punch(
        self,
        employee_id: str,
        work_date: date | str,
        punch_type: PunchType | str,
        *,
        timestamp: Optional[datetime] = None,
        note: Optional[str] = None,
        location: Optional[str] = None,
        employee_name: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> AttendanceRecord:
        employee_id = require_employee_id(employee_id)
        day = coerce_date(work_date)
        punch = Punch(
            punch_type=coerce_punch_type(punch_type),
            timestamp=timestamp or self._clock(),
            note=optional_text(note, "Note"),
            location=optional_text(location, "Location"),
        )

        with self._locks.hold((employee_id, day)):
            current = self._attendance.get_for_employee_and_date(employee_id, day)
            if current is None:
                current = self._ledger.open_record(employee_id, self._resolve_name(employee_id, employee_name), day)

            try:
                updated = self._ledger.append(current, punch)
            except (InvalidPunchSequenceError, SessionAlreadyClosedError) as e:
                logger.warning("Punch %s rejected for %s on %s: %s", punch.punch_type.value, employee_id, day, e)
                raise

            check_cancelled(cancel, "append_punch")
            if current.record_id is None:
                saved = self._attendance.insert(updated)
            else:
                saved = self._attendance.replace(updated, expected_version=current.version)

        logger.info("Punch %s recorded for %s on %s", punch.punch_type.value, employee_id, day)
        return saved

    def bulk_punch(
        self,
        employees: Optional[Iterable[Employee | str]],
        work_date: date | str,
        punch_type: PunchType | str,
        *,
        timestamp: Optional[datetime] = None,
        note: Optional[str] = None,
        location: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> BulkPunchResult:
        """Punch several employees; each punch succeeds or fails on its own.

        With ``employees=None`` every active employee not yet marked for the
        day is punched.
        """
        if employees is None:
            employees = unmarked(self.merge_for_date(work_date, cancel=cancel))

        result = BulkPunchResult()
        for e in employees:
            employee_id = e.employee_id if isinstance(e, Employee) else e
            name = e.name if isinstance(e, Employee) else None
            try:
                record = self.append_punch(
                    employee_id,
                    work_date,
                    punch_type,
                    timestamp=timestamp,
                    note=note,
                    location=location,
                    employee_name=name,
                    cancel=cancel,
                )
            except OperationCancelledError:
                raise
            except DomainError as err:
                result.failed.append((str(employee_id), str(err)))
            else:
                result.succeeded.append(record)

        logger.info("Bulk punch: %d succeeded, %d failed", len(result.succeeded), len(result.failed))
        return result

    def update_record(
        self,
        record_id: int,
        *,
        status: AttendanceStatus | str | None = None,
        employee_name: Optional[str] = None,
        employee_id: Optional[str] = None,
        work_date: date | str | None = None,
        cancel: Optional[threading.Event] = None,
    ) -> AttendanceRecord:
        """Explicit correction path. Leaving Present drops the punch log."""
        before = self.get_record(record_id)
        new_employee_id = require_employee_id(employee_id) if employee_id is not None else before.employee_id
        new_day = coerce_date(work_date) if work_date is not None else before.work_date
        new_status = coerce_status(status) if status is not None else before.status
        new_name = (
            require_non_empty(optional_text(employee_name, "Employee name"), "Employee name")
            if employee_name is not None
            else None
        )
        target_key = (new_employee_id, new_day)

        with self._locks.hold_many([before.key, target_key]):
            current = self.get_record(record_id)
            if current.key != before.key:
                raise ConflictError(f"Attendance record {record_id} was moved concurrently")

            if target_key != current.key and self._attendance.get_for_employee_and_date(*target_key):
                raise AlreadyMarkedError(f"{new_employee_id} is already marked for {new_day}")

            updated = current.with_changes(
                employee_id=new_employee_id,
                employee_name=new_name or current.employee_name,
                work_date=new_day,
                status=new_status,
                punches=current.punches if new_status == AttendanceStatus.PRESENT else (),
            )

            check_cancelled(cancel, "update_record")
            saved = self._attendance.replace(updated, expected_version=current.version)

        logger.info("Updated record %s (%s, %s, %s)", record_id, new_employee_id, new_day, new_status.value)
        return saved

    def delete_record(self, record_id: int, *, cancel: Optional[threading.Event] = None) -> None:
        before = self.get_record(record_id)
        with self._locks.hold(before.key):
            current = self.get_record(record_id)
            check_cancelled(cancel, "delete_record")
            if not self._attendance.delete(current.record_id, expected_version=current.version):
                raise NotFoundError(f"Attendance record {record_id} does not exist")

        logger.info("Deleted record %s", record_id)

    # endregion

    # region Reads
    def get_record(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Attendance record {record_id} does not exist")
        return record

    def get_for_employee_date(self, employee_id: str, work_date: date | str) -> AttendanceRecord:
        employee_id = require_employee_id(employee_id)
        day = coerce_date(work_date)
        record = self._attendance.get_for_employee_and_date(employee_id, day)
        if not record:
            raise NotFoundError(f"No attendance record for {employee_id} on {day}")
        return record

    def daily_punch_log(self, employee_id: str, work_date: date | str) -> tuple[Punch, ...]:
        try:
            return self.get_for_employee_date(employee_id, work_date).punches
        except NotFoundError:
            return ()

    def list_records(
        self,
        start: date | str,
        end: date | str,
        *,
        employee_id: Optional[str] = None,
        search: Optional[str] = None,
        status: AttendanceStatus | str | None = None,
        sort_by: str = "date",
        order: str = "desc",
    ) -> list[AttendanceRecord]:
        records = self._attendance.list_between(
            start_date=coerce_date(start, "Start date"),
            end_date=coerce_date(end, "End date"),
            employee_id=require_employee_id(employee_id) if employee_id is not None else None,
        )
        return sort_records(filter_records(records, search=search, status=status), sort_by=sort_by, order=order)

    def merge_for_date(
        self,
        work_date: date | str,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> list[MergedRow]:
        day = coerce_date(work_date)
        check_cancelled(cancel, "merge_for_date")
        roster: Sequence[Employee] = self._roster.list_active_employees()
        records = self._attendance.list_between(start_date=day, end_date=day)
        logger.debug("Merging %d employees with %d records for %s", len(roster), len(records), day)
        return merge_for_date(roster, records, day)

    # endregion
