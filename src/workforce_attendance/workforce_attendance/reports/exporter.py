from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Optional

from ..attendance.model import MergedRow, Punch
from ..common.datetime_utils import to_day
from ..core.constants import DATE_FORMAT, EXPORT_COLUMNS, EXPORT_TIME_FORMAT
from ..core.enums import ExportFormat
from ..core.exceptions import ValidationError


def _fmt_time(punch: Optional[Punch]) -> str:
    return punch.timestamp.strftime(EXPORT_TIME_FORMAT) if punch else ""


def to_table_row(row: MergedRow, work_date: Optional[date] = None) -> list[str]:
    """Employee, Date, Status, In Time, Out Time.

    In Time is the first IN punch, Out Time the last OUT punch.
    """
    record = row.record
    day = to_day(work_date or row.work_date)
    return [
        row.employee.name,
        day.strftime(DATE_FORMAT),
        row.status_label,
        _fmt_time(record.first_in() if record else None),
        _fmt_time(record.last_out() if record else None),
    ]


def export(
    rows: Iterable[MergedRow],
    work_date: Optional[date] = None,
    fmt: ExportFormat | str = ExportFormat.CSV,
) -> bytes:
    try:
        fmt = ExportFormat(fmt.lower() if isinstance(fmt, str) else fmt)
    except ValueError:
        raise ValidationError(f"Unsupported export format: {fmt!r}") from None

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow(to_table_row(row, work_date))
    return out.getvalue().encode("utf-8")
