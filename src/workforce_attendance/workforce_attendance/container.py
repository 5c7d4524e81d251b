from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .analytics.service import AnalyticsService
from .attendance.factory import PunchPolicyFactory
from .attendance.ledger import PunchLedger
from .attendance.memory_repository import InMemoryAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .calendar_view.service import CalendarService
from .common.datetime_utils import now_local
from .common.locks import KeyedLock
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .employees.repository import RosterProvider, StaticRoster
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    roster: RosterProvider
    clock: Callable[[], datetime]

    attendance_service: AttendanceService
    calendar_service: CalendarService
    analytics_service: AnalyticsService
    report_service: ReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    attendance_repo: Optional[AttendanceRepository] = None,
    roster: Optional[RosterProvider] = None,
    punch_policy: str | None = None,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire repositories and services.

    With ``db_config`` the MySQL adapters are used for whatever was not passed
    in explicitly; otherwise everything stays in memory.
    """
    if db_config is not None:
        from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
        from .database.connection import DBConfig, DatabaseConnection
        from .employees.mysql_employee_repository import MySQLEmployeeRepository

        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        attendance_repo = attendance_repo or MySQLAttendanceRepository(conn)
        roster = roster or MySQLEmployeeRepository(conn)

    attendance_repo = attendance_repo or InMemoryAttendanceRepository()
    roster = roster or StaticRoster()

    attendance_service = AttendanceService(
        attendance_repo,
        roster,
        ledger=PunchLedger(PunchPolicyFactory().for_name(punch_policy)),
        clock=clock,
        locks=KeyedLock(timeout=lock_timeout),
    )

    return Container(
        attendance_repo=attendance_repo,
        roster=roster,
        clock=clock,
        attendance_service=attendance_service,
        calendar_service=CalendarService(attendance_repo),
        analytics_service=AnalyticsService(attendance_repo, clock=clock),
        report_service=ReportService(attendance_service),
    )
