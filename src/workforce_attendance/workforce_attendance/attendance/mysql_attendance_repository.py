from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, Punch
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = "record_id, employee_id, employee_name, work_date, status, punches, version"


def punches_to_json(punches: Sequence[Punch]) -> str:
    return json.dumps(
        [
            {
                "type": p.punch_type.value,
                "timestamp": p.timestamp.isoformat(),
                "note": p.note,
                "location": p.location,
            }
            for p in punches
        ]
    )


def punches_from_json(raw: Any) -> tuple[Punch, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    items = json.loads(raw) if isinstance(raw, str) else raw
    return tuple(
        Punch(
            punch_type=PunchType(item["type"]),
            timestamp=datetime.fromisoformat(item["timestamp"]),
            note=item.get("note"),
            location=item.get("location"),
        )
        for item in items
    )


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=str(r["employee_id"]),
        employee_name=r["employee_name"],
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        punches=punches_from_json(r.get("punches")),
        version=int(r["version"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["work_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if employee_id is not None:
            where.append("employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(where)}
                ORDER BY work_date ASC, record_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY work_date ASC, record_id ASC")
            return [_to_record(r) for r in fetchall(cur)]

    def insert(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, employee_name, work_date, status, punches, version)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.work_date,
                    record.status.value,
                    punches_to_json(record.punches),
                ),
            )
            return record.with_changes(record_id=int(cur.lastrowid), version=1)

    def replace(self, record: AttendanceRecord, *, expected_version: int) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET employee_id=%s, employee_name=%s, work_date=%s, status=%s, punches=%s, version=version+1
                WHERE record_id=%s AND version=%s
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.work_date,
                    record.status.value,
                    punches_to_json(record.punches),
                    int(record.record_id),
                    int(expected_version),
                ),
            )
            if cur.rowcount == 0:
                logger.warning("Stale write rejected for record %s", record.record_id)
                raise ConflictError(f"Attendance record {record.record_id} was modified concurrently")
            return record.with_changes(version=int(expected_version) + 1)

    def delete(self, record_id: int, *, expected_version: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if expected_version is None:
                cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
                return cur.rowcount > 0

            cur.execute(
                "DELETE FROM attendance_records WHERE record_id=%s AND version=%s",
                (int(record_id), int(expected_version)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM attendance_records WHERE record_id=%s", (int(record_id),))
            if fetchone(cur):
                raise ConflictError(f"Attendance record {record_id} was modified concurrently")
            return False
