from __future__ import annotations

from ...core.enums import PunchType
from ..model import AttendanceRecord
from .base import PunchPolicy


class MultiSessionPolicy(PunchPolicy):
    """Any number of IN/OUT pairs per day, still strictly alternating."""

    name = "multi"

    def check_append(self, record: AttendanceRecord, punch_type: PunchType) -> None:
        self.check_sequence(record, punch_type)
