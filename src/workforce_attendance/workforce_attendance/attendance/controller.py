from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, timedelta

from flask import Flask, jsonify, request

from ..analytics.model import AnalyticsSnapshot
from ..calendar_view.aggregator import CalendarEvent, DaySummary
from ..common.datetime_utils import month_range, to_day
from ..common.validators import coerce_date
from ..container import Container
from ..core.constants import DATE_FORMAT
from ..core.exceptions import (
    AlreadyMarkedError,
    AttendanceTimeoutError,
    ConflictError,
    DomainError,
    InvalidPunchSequenceError,
    NotFoundError,
    OperationCancelledError,
    SessionAlreadyClosedError,
    ValidationError,
)
from ..employees.model import Employee
from .model import AttendanceRecord, MergedRow, Punch

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    AlreadyMarkedError: 409,
    ConflictError: 409,
    InvalidPunchSequenceError: 409,
    SessionAlreadyClosedError: 409,
    OperationCancelledError: 499,
    AttendanceTimeoutError: 504,
}


def punch_to_dict(p: Punch) -> dict:
    return {
        "type": p.punch_type.value,
        "timestamp": p.timestamp.isoformat(),
        "note": p.note,
        "location": p.location,
    }


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "employeeId": r.employee_id,
        "employeeName": r.employee_name,
        "date": r.work_date.strftime(DATE_FORMAT),
        "status": r.status.value,
        "punches": [punch_to_dict(p) for p in r.punches],
        "version": r.version,
    }


def row_to_dict(row: MergedRow) -> dict:
    return {
        "employee": asdict(row.employee),
        "date": row.work_date.strftime(DATE_FORMAT),
        "status": row.status_label,
        "canPunch": row.can_punch,
        "record": record_to_dict(row.record) if row.record else None,
    }


def summary_to_dict(s: DaySummary) -> dict:
    return {
        "date": s.work_date.strftime(DATE_FORMAT),
        "statusCounts": {status.value: count for status, count in s.status_counts.items()},
        "dominantStatus": s.dominant_status.value if s.dominant_status else None,
        "summary": s.summary,
        "records": [record_to_dict(r) for r in s.records_by_employee.values()],
    }


def event_to_dict(e: CalendarEvent) -> dict:
    return {
        "id": e.record_id,
        "title": e.title,
        "start": e.start.strftime(DATE_FORMAT),
        "end": e.end.strftime(DATE_FORMAT),
        "allDay": e.all_day,
        "record": record_to_dict(e.record),
    }


def snapshot_to_dict(s: AnalyticsSnapshot) -> dict:
    def _emp(c):
        return {"employeeId": c.employee_id, "employeeName": c.employee_name, "count": c.count} if c else None

    return {
        "trend": [
            {"month": t.month, "year": t.year, "present": t.present, "absent": t.absent, "onLeave": t.on_leave}
            for t in s.trend
        ],
        "statusBreakdown": [{"status": c.status.value, "count": c.count} for c in s.status_breakdown],
        "topAttendance": [_emp(c) for c in s.top_attendance],
        "mostPunctual": _emp(s.most_punctual),
        "leastPunctual": _emp(s.least_punctual),
        "totalAttendance": s.total_attendance,
        "totalPunchesToday": s.total_punches_today,
        "totalPunchesThisMonth": s.total_punches_this_month,
        "avgPunchesPerEmployee": s.avg_punches_per_employee,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _today() -> date:
        return to_day(container.clock())

    def _day_arg(name: str = "date") -> date:
        value = request.args.get(name)
        return coerce_date(value) if value else _today()

    def _int_arg(name: str, default: int) -> int:
        value = request.args.get(name)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValidationError(f"{name} must be an integer, got {value!r}") from None

    def _bulk_target(e) -> Employee | str:
        if not isinstance(e, dict):
            return str(e)
        employee_id = str(e.get("employeeId") or "")
        if e.get("employeeName") is None:
            return employee_id
        return Employee(employee_id=employee_id, name=e["employeeName"])

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in ERROR_STATUS.items() if isinstance(e, cls)), 400)
        if status >= 500:
            logger.error("%s: %s", type(e).__name__, e)
        return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), status

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        today = _today()
        start = request.args.get("start") or (today - timedelta(days=30)).strftime(DATE_FORMAT)
        end = request.args.get("end") or today.strftime(DATE_FORMAT)
        records = service.list_records(
            start,
            end,
            employee_id=request.args.get("employeeId"),
            search=request.args.get("search"),
            status=request.args.get("status"),
            sort_by=request.args.get("sortBy", "date"),
            order=request.args.get("sortOrder", "desc"),
        )
        return jsonify([record_to_dict(r) for r in records])

    @app.route("/attendance", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark():
        data = _json_body()
        record = service.quick_mark(
            data.get("employeeId"),
            data.get("employeeName"),
            data.get("date"),
            data.get("status"),
        )
        return jsonify(record_to_dict(record)), 201

    @app.route("/attendance/<int:record_id>", methods=["PUT"], endpoint="attendance_update")
    def attendance_update(record_id: int):
        data = _json_body()
        record = service.update_record(
            record_id,
            status=data.get("status"),
            employee_name=data.get("employeeName"),
            employee_id=data.get("employeeId"),
            work_date=data.get("date"),
        )
        return jsonify(record_to_dict(record))

    @app.route("/attendance/<int:record_id>", methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(record_id: int):
        service.delete_record(record_id)
        return jsonify({"success": True})

    @app.route("/attendance/punch", methods=["POST"], endpoint="attendance_punch")
    def attendance_punch():
        data = _json_body()
        record = service.append_punch(
            data.get("employeeId"),
            data.get("date") or _today(),
            data.get("type"),
            note=data.get("note"),
            location=data.get("location"),
            employee_name=data.get("employeeName"),
        )
        return jsonify(record_to_dict(record))

    @app.route("/attendance/bulk-punch", methods=["POST"], endpoint="attendance_bulk_punch")
    def attendance_bulk_punch():
        data = _json_body()
        raw = data.get("employees")
        if raw is not None and not isinstance(raw, list):
            raise ValidationError("employees must be a list")
        # Omitted list: punch everyone not yet marked that day.
        employees = None if raw is None else [_bulk_target(e) for e in raw]
        result = service.bulk_punch(
            employees,
            data.get("date") or _today(),
            data.get("type"),
            note=data.get("note"),
            location=data.get("location"),
        )
        return jsonify(
            {
                "succeeded": [record_to_dict(r) for r in result.succeeded],
                "failed": [{"employeeId": e, "message": msg} for e, msg in result.failed],
            }
        )

    @app.route("/attendance/roster", methods=["GET"], endpoint="attendance_roster")
    def attendance_roster():
        rows = service.merge_for_date(_day_arg())
        return jsonify([row_to_dict(r) for r in rows])

    @app.route("/attendance/daily/<employee_id>/<day>", methods=["GET"], endpoint="attendance_daily")
    def attendance_daily(employee_id: str, day: str):
        return jsonify([punch_to_dict(p) for p in service.daily_punch_log(employee_id, day)])

    @app.route("/attendance/calendar", methods=["GET"], endpoint="attendance_calendar")
    def attendance_calendar():
        calendar = container.calendar_service
        today = _today()
        view = request.args.get("view", "range")

        if view == "month":
            summaries = calendar.month_view(_int_arg("year", today.year), _int_arg("month", today.month))
        elif view == "week":
            summaries = calendar.week_view(_day_arg())
        elif view in ("range", "events"):
            default_start, default_end = month_range(today.year, today.month)
            start = request.args.get("start") or default_start
            end = request.args.get("end") or default_end
            if view == "events":
                return jsonify([event_to_dict(e) for e in calendar.events(start, end)])
            summaries = calendar.summaries(start, end)
        else:
            raise ValidationError(f"Unknown calendar view: {view!r}")

        return jsonify([summary_to_dict(s) for s in summaries])

    @app.route("/attendance/analytics", methods=["GET"], endpoint="attendance_analytics")
    def attendance_analytics():
        snapshot = container.analytics_service.snapshot(
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return jsonify(snapshot_to_dict(snapshot))

    @app.route("/attendance/export.csv", methods=["GET"], endpoint="attendance_export")
    def attendance_export():
        export_file = container.report_service.daily_export(_day_arg(), fmt=request.args.get("format", "csv"))
        return app.response_class(
            export_file.content,
            mimetype=export_file.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export_file.filename}"},
        )
