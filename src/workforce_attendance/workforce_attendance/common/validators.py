from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, to_day


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Stripped text, or None when absent or blank. Non-strings are rejected."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text, got {value!r}")
    return value.strip() or None


def require_employee_id(value: Any) -> str:
    if value is None or isinstance(value, bool):
        raise ValidationError("Employee id is required")
    return require_non_empty(str(value), "Employee id")


def coerce_date(value: Any, field_name: str = "Date") -> date:
    if isinstance(value, (date, datetime)):
        return to_day(value)
    if isinstance(value, str):
        try:
            # Accept full ISO timestamps too; only the day matters.
            return parse_iso_date(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} is not a valid YYYY-MM-DD date: {value!r}")


def _normalize(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


def coerce_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    if isinstance(value, str):
        wanted = _normalize(value)
        for status in AttendanceStatus:
            if wanted in (_normalize(status.value), _normalize(status.name)):
                return status
    raise ValidationError(f"Unknown attendance status: {value!r}")


def coerce_punch_type(value: Any) -> PunchType:
    if isinstance(value, PunchType):
        return value
    if isinstance(value, str):
        try:
            return PunchType(value.strip().upper())
        except ValueError:
            pass
    raise ValidationError(f"Punch type must be IN or OUT, got {value!r}")
