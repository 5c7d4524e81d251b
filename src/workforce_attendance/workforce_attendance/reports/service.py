from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.cancellation import check_cancelled
from ..common.validators import coerce_date
from ..core.constants import DATE_FORMAT
from ..core.enums import ExportFormat
from .exporter import export

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFile:
    filename: str
    mimetype: str
    content: bytes


class ReportService:
    """Daily roster report for download."""

    def __init__(self, attendance_service: AttendanceService):
        self._attendance_service = attendance_service

    def daily_export(
        self,
        work_date: date | str,
        *,
        fmt: ExportFormat | str = ExportFormat.CSV,
        cancel: Optional[threading.Event] = None,
    ) -> ExportFile:
        day = coerce_date(work_date)
        rows = self._attendance_service.merge_for_date(day, cancel=cancel)
        check_cancelled(cancel, "export")
        content = export(rows, day, fmt)
        logger.info("Exported %d rows for %s", len(rows), day)
        return ExportFile(
            filename=f"attendance_{day.strftime(DATE_FORMAT)}.csv",
            mimetype="text/csv",
            content=content,
        )
