from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Sequence

from ..absence.scheduler import AbsenceScheduler
from ..common.datetime_utils import Clock, now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyMarkedError, NotFoundError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceMark, AttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: badge check-in, manual absence and attendance listings."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        absence_scheduler: AbsenceScheduler,
        *,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._absence = absence_scheduler
        self._clock = clock

    def check_in(self, card_id: str) -> Student:
        card_id = require_non_empty(card_id, "Card ID")
        student = self._students.get_by_card_id(card_id)
        if not student:
            raise NotFoundError("Student not found with this card ID")

        self._record(student, status=AttendanceStatus.PRESENT)
        self._absence.cancel(student.student_id)
        logger.info("Attendance recorded for %s", student.name)
        return student

    def mark_absent_manually(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        self._record(student, status=AttendanceStatus.ABSENT)
        self._absence.cancel(student.student_id)
        logger.info("%s marked absent manually", student.name)
        return student

    def _record(self, student: Student, *, status: AttendanceStatus) -> None:
        now = self._clock()
        today = now.date()

        # Fast path for the common duplicate; the insert below is still the real arbiter.
        if self._attendance.get_for_student_and_date(student.student_id, today):
            raise AlreadyMarkedError(f"Attendance already recorded today for {student.name}")

        self._attendance.create_mark(
            AttendanceMark(
                mark_id=str(uuid.uuid4()),
                student_id=student.student_id,
                student_name=student.name,
                card_id=student.card_id,
                mark_date=today,
                mark_time=now.time().replace(microsecond=0),
                status=status,
                auto_marked=False,
            )
        )

    def today(self) -> Sequence[AttendanceRow]:
        return self._attendance.list_for_date(self._clock().date())

    def by_date(self, mark_date: date) -> Sequence[AttendanceRow]:
        return self._attendance.list_for_date(mark_date)

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> Sequence[AttendanceRow]:
        return self._attendance.list_recent(limit if limit > 0 else DEFAULT_RECENT_LIMIT)
