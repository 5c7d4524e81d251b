from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.cancellation import check_cancelled
from ..common.datetime_utils import month_range, week_range
from ..common.validators import coerce_date
from ..core.exceptions import ValidationError
from .aggregator import CalendarEvent, DaySummary, aggregate, calendar_events

logger = logging.getLogger(__name__)


class CalendarService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def summaries(
        self,
        start: date | str,
        end: date | str,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> list[DaySummary]:
        start_day = coerce_date(start, "Start date")
        end_day = coerce_date(end, "End date")
        if end_day < start_day:
            raise ValidationError("End date must not be before start date")

        check_cancelled(cancel, "aggregate")
        records = self._attendance.list_between(start_date=start_day, end_date=end_day)
        logger.debug("Aggregating %d records for %s..%s", len(records), start_day, end_day)
        return aggregate(records, start_day, end_day)

    def month_view(self, year: int, month: int, **kwargs) -> list[DaySummary]:
        if not 1 <= int(year) <= 9999:
            raise ValidationError(f"Year must be 1..9999, got {year!r}")
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"Month must be 1..12, got {month!r}")
        return self.summaries(*month_range(int(year), int(month)), **kwargs)

    def week_view(self, day: date | str, **kwargs) -> list[DaySummary]:
        return self.summaries(*week_range(coerce_date(day)), **kwargs)

    def events(self, start: date | str, end: date | str) -> list[CalendarEvent]:
        records = self._attendance.list_between(
            start_date=coerce_date(start, "Start date"),
            end_date=coerce_date(end, "End date"),
        )
        return calendar_events(records)
