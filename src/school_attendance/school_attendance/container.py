from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from .absence.day_cycle import DayCycleController
from .absence.scheduler import AbsenceScheduler
from .absence.streak import ConsecutiveAbsenceEvaluator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .database.connection import DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import DashboardService, ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    jobs: BaseScheduler

    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository
    reports_repo: ReportRepository

    absence_scheduler: AbsenceScheduler
    day_cycle: DayCycleController

    student_service: StudentService
    attendance_service: AttendanceService
    notification_service: NotificationService
    report_service: ReportService
    dashboard_service: DashboardService


def wire_container(
    *,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    notifications_repo: NotificationRepository,
    reports_repo: ReportRepository,
    jobs: BaseScheduler,
    attendance_window_seconds: float,
    day_duration_seconds: float,
    clock: Clock = now_local,
) -> Container:
    """Assemble services on top of any repository implementations (MySQL or in-memory)."""
    evaluator = ConsecutiveAbsenceEvaluator(attendance_repo)
    absence_scheduler = AbsenceScheduler(
        students_repo,
        attendance_repo,
        notifications_repo,
        evaluator,
        jobs,
        window_seconds=attendance_window_seconds,
        clock=clock,
    )
    report_service = ReportService(reports_repo, attendance_repo, students_repo, clock=clock)
    day_cycle = DayCycleController(
        students_repo,
        absence_scheduler,
        jobs,
        day_duration_seconds=day_duration_seconds,
        clock=clock,
        on_rollover=report_service.snapshot,
    )

    return Container(
        jobs=jobs,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        reports_repo=reports_repo,
        absence_scheduler=absence_scheduler,
        day_cycle=day_cycle,
        student_service=StudentService(students_repo, absence_scheduler),
        attendance_service=AttendanceService(attendance_repo, students_repo, absence_scheduler, clock=clock),
        notification_service=NotificationService(notifications_repo, clock=clock),
        report_service=report_service,
        dashboard_service=DashboardService(
            students_repo, attendance_repo, notifications_repo, absence_scheduler, day_cycle, clock=clock
        ),
    )


def build_container(
    *,
    db_config: dict,
    attendance_window_seconds: float,
    day_duration_seconds: float,
    jobs: Optional[BaseScheduler] = None,
) -> Container:
    conn = DatabaseConnection.from_dict(db_config)
    return wire_container(
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        reports_repo=MySQLReportRepository(conn),
        jobs=jobs or BackgroundScheduler(),
        attendance_window_seconds=attendance_window_seconds,
        day_duration_seconds=day_duration_seconds,
    )
