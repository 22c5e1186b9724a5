from __future__ import annotations

from datetime import date, timedelta

from ..attendance.repository import AttendanceRepository
from ..core.constants import STREAK_WINDOW_DAYS
from ..core.enums import AttendanceStatus


class ConsecutiveAbsenceEvaluator:
    """Counts how many days in a row a student has been absent.

    Walks backward from the reference day over a fixed trailing window. A day with no
    mark counts as absent (presumed unrecorded absence); the walk stops at the first
    present mark. Read-only.
    """

    def __init__(self, attendance: AttendanceRepository, *, window_days: int = STREAK_WINDOW_DAYS):
        self._attendance = attendance
        self._window_days = int(window_days)

    def streak(self, student_id: str, as_of: date) -> int:
        start = as_of - timedelta(days=self._window_days - 1)
        history = self._attendance.history_between(student_id, start, as_of)
        status_by_date = {m.mark_date: m.status for m in history}

        count = 0
        day = as_of
        for _ in range(self._window_days):
            if status_by_date.get(day) == AttendanceStatus.PRESENT:
                break
            count += 1
            day -= timedelta(days=1)
        return count
