from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import ReportExistsError
from ..students.repository import StudentRepository
from .model import DailyReport, DashboardStats
from .repository import ReportRepository

logger = logging.getLogger(__name__)


def attendance_rate(present: int, total: int) -> int:
    """Whole-number percentage of present students, halves rounded up; 0 for an empty roster."""
    if total <= 0:
        return 0
    return (present * 200 + total) // (2 * total)


class ReportService:
    def __init__(
        self,
        reports: ReportRepository,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Clock = now_local,
    ):
        self._reports = reports
        self._attendance = attendance
        self._students = students
        self._clock = clock

    def list_reports(self) -> Sequence[DailyReport]:
        return self._reports.list_all()

    def generate_today(self) -> DailyReport:
        today = self._clock().date()
        report = self._create_for(today)
        if report is None:
            raise ReportExistsError("Report already exists for today")
        return report

    def snapshot(self, report_date: date) -> Optional[DailyReport]:
        """Day-cycle rollover: record the day if it has any attendance and no report yet."""
        counts = self._attendance.count_by_status(report_date)
        if sum(counts.values()) == 0:
            return None
        return self._create_for(report_date)

    def _create_for(self, report_date: date) -> Optional[DailyReport]:
        if self._reports.get_for_date(report_date):
            return None

        counts = self._attendance.count_by_status(report_date)
        total = self._students.count()
        present = int(counts.get(AttendanceStatus.PRESENT, 0))
        absent = int(counts.get(AttendanceStatus.ABSENT, 0))

        report = DailyReport(
            report_id=str(uuid.uuid4()),
            report_date=report_date,
            day_number=self._reports.last_day_number() + 1,
            total_students=total,
            present_count=present,
            absent_count=absent,
            attendance_rate=attendance_rate(present, total),
        )
        if not self._reports.create(report):
            return None
        logger.info("Daily report for %s generated (day %d, %d%% present)", report_date, report.day_number, report.attendance_rate)
        return report


class DashboardService:
    """Read-only counters for the dashboard; timer figures come from process memory."""

    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceRepository,
        notifications,
        absence_scheduler,
        day_cycle,
        *,
        clock: Clock = now_local,
    ):
        self._students = students
        self._attendance = attendance
        self._notifications = notifications
        self._absence = absence_scheduler
        self._day_cycle = day_cycle
        self._clock = clock

    def stats(self) -> DashboardStats:
        counts = self._attendance.count_by_status(self._clock().date())
        return DashboardStats(
            total_students=self._students.count(),
            present_today=int(counts.get(AttendanceStatus.PRESENT, 0)),
            absent_today=int(counts.get(AttendanceStatus.ABSENT, 0)),
            pending_notifications=self._notifications.count_pending(),
            pending_absence_timers=self._absence.active_count(),
            day_cycle_state=self._day_cycle.state.value,
        )
