from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.cancellation import check_cancelled
from ..common.datetime_utils import now_local
from ..common.validators import coerce_date
from ..core.exceptions import ValidationError
from .engine import compute
from .model import AnalyticsSnapshot

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, attendance: AttendanceRepository, *, clock: Callable[[], datetime] = now_local):
        self._attendance = attendance
        self._clock = clock

    def snapshot(
        self,
        *,
        start: date | str | None = None,
        end: date | str | None = None,
        as_of: Optional[datetime] = None,
        cancel: Optional[threading.Event] = None,
    ) -> AnalyticsSnapshot:
        """Analytics over all records, or over [start, end] when both are given."""
        if (start is None) != (end is None):
            raise ValidationError("Start and end dates must be given together")

        check_cancelled(cancel, "compute")
        if start is not None:
            start_day = coerce_date(start, "Start date")
            end_day = coerce_date(end, "End date")
            if end_day < start_day:
                raise ValidationError("End date must not be before start date")
            records = self._attendance.list_between(start_date=start_day, end_date=end_day)
        else:
            records = self._attendance.list_all()

        as_of = as_of or self._clock()
        logger.debug("Computing analytics over %d records as of %s", len(records), as_of)
        return compute(records, as_of)
