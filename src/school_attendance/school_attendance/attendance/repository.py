from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceMark, AttendanceRow


class AttendanceRepository(Protocol):
    """Repository interface for attendance marks.

    `create_mark` must be atomic on (student_id, mark_date): when a mark already exists
    for that pair it raises AlreadyMarkedError and writes nothing. This is the only
    arbitration between a check-in and an absence timer firing for the same day.
    """

    def get_for_student_and_date(self, student_id: str, mark_date: date) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def create_mark(self, mark: AttendanceMark) -> None:
        raise NotImplementedError

    def history_between(self, student_id: str, start_date: date, end_date: date) -> Sequence[AttendanceMark]:
        """Marks within [start_date, end_date], newest first."""

        raise NotImplementedError

    def list_for_date(self, mark_date: date) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def count_by_status(self, mark_date: date) -> Mapping[AttendanceStatus, int]:
        raise NotImplementedError
