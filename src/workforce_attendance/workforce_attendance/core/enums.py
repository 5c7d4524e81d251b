from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Day status of one employee, as stored by the repositories."""

    PRESENT = "Present"
    ABSENT = "Absent"
    ON_LEAVE = "On Leave"


class PunchType(str, Enum):
    """Clock event kind."""

    IN = "IN"
    OUT = "OUT"


class ExportFormat(str, Enum):
    CSV = "csv"


# Tie-break order for dominant status and for listing tallies.
STATUS_PRIORITY: tuple[AttendanceStatus, ...] = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.ABSENT,
    AttendanceStatus.ON_LEAVE,
)
