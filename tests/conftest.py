from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pytest
from apscheduler.jobstores.base import ConflictingIdError, JobLookupError

from school_attendance.attendance.model import AttendanceMark, AttendanceRow
from school_attendance.container import wire_container
from school_attendance.core.enums import AttendanceStatus, NotificationStatus
from school_attendance.core.exceptions import AlreadyMarkedError, DuplicateIdentifierError
from school_attendance.notifications.model import Notification, NotificationRow
from school_attendance.reports.model import DailyReport
from school_attendance.students.model import Student

WINDOW_SECONDS = 60
DAY_SECONDS = 120
START = datetime(2026, 3, 2, 8, 0, 0)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class ManualJob:
    id: str
    func: Callable
    args: tuple
    trigger: str
    next_run_time: datetime
    seconds: Optional[float] = None


class ManualJobScheduler:
    """Stand-in for an APScheduler scheduler: jobs only run when the test advances time."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.jobs: dict[str, ManualJob] = {}
        self.running = False

    def start(self):
        self.running = True

    def shutdown(self, wait: bool = True):
        self.running = False

    def add_job(self, func, trigger, args=None, id=None, replace_existing=False, run_date=None, seconds=None, **_):
        if id in self.jobs and not replace_existing:
            raise ConflictingIdError(id)
        if trigger == "date":
            next_run = run_date
        elif trigger == "interval":
            next_run = self.clock.now + timedelta(seconds=seconds)
        else:
            raise ValueError(f"unsupported trigger {trigger!r}")
        job = ManualJob(id=id, func=func, args=tuple(args or ()), trigger=trigger, next_run_time=next_run, seconds=seconds)
        self.jobs[id] = job
        return job

    def remove_job(self, job_id, jobstore=None):
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]

    def get_job(self, job_id):
        return self.jobs.get(job_id)

    def job_ids(self, prefix: str = "") -> list[str]:
        return [job_id for job_id in self.jobs if job_id.startswith(prefix)]

    def advance(self, seconds: float) -> None:
        target = self.clock.now + timedelta(seconds=seconds)
        while True:
            due = [j for j in self.jobs.values() if j.next_run_time <= target]
            if not due:
                break
            job = min(due, key=lambda j: j.next_run_time)
            self.clock.now = max(self.clock.now, job.next_run_time)
            if job.trigger == "date":
                del self.jobs[job.id]
            else:
                job.next_run_time += timedelta(seconds=job.seconds)
            job.func(*job.args)
        self.clock.now = target


class InMemoryAttendance:
    def __init__(self, class_lookup: Callable[[str], Optional[str]] = lambda _sid: None):
        self._lock = threading.Lock()
        self.marks: dict[tuple[str, date], AttendanceMark] = {}
        self._class_lookup = class_lookup

    def get_for_student_and_date(self, student_id: str, mark_date: date) -> Optional[AttendanceMark]:
        return self.marks.get((student_id, mark_date))

    def create_mark(self, mark: AttendanceMark) -> None:
        with self._lock:
            key = (mark.student_id, mark.mark_date)
            if key in self.marks:
                raise AlreadyMarkedError(f"Attendance already recorded today for {mark.student_name}")
            self.marks[key] = mark

    def history_between(self, student_id: str, start_date: date, end_date: date):
        items = [
            m
            for (sid, d), m in self.marks.items()
            if sid == student_id and start_date <= d <= end_date
        ]
        return sorted(items, key=lambda m: m.mark_date, reverse=True)

    def list_for_date(self, mark_date: date):
        items = [m for (_, d), m in self.marks.items() if d == mark_date]
        items.sort(key=lambda m: m.mark_time, reverse=True)
        return [AttendanceRow(mark=m, student_class=self._class_lookup(m.student_id)) for m in items]

    def list_recent(self, limit: int):
        items = sorted(self.marks.values(), key=lambda m: (m.mark_date, m.mark_time), reverse=True)
        return [AttendanceRow(mark=m, student_class=self._class_lookup(m.student_id)) for m in items[:limit]]

    def count_by_status(self, mark_date: date):
        counts = {status: 0 for status in AttendanceStatus}
        for (_, d), m in self.marks.items():
            if d == mark_date:
                counts[m.status] += 1
        return counts

    def purge_student(self, student_id: str) -> None:
        for key in [k for k in self.marks if k[0] == student_id]:
            del self.marks[key]

    def for_student(self, student_id: str) -> list[AttendanceMark]:
        return [m for (sid, _), m in self.marks.items() if sid == student_id]


class InMemoryNotifications:
    def __init__(self, student_lookup: Callable[[str], Optional[Student]] = lambda _sid: None):
        self.items: dict[str, Notification] = {}
        self._student_lookup = student_lookup

    def create(self, notification: Notification) -> None:
        self.items[notification.notification_id] = notification

    def list_with_contacts(self):
        rows = []
        for n in reversed(list(self.items.values())):
            s = self._student_lookup(n.student_id)
            rows.append(
                NotificationRow(
                    notification=n,
                    parent_phone=s.parent_phone if s else None,
                    parent_email=s.parent_email if s else None,
                    student_class=s.student_class if s else None,
                )
            )
        return rows

    def mark_sent(self, notification_id: str, sent_at: datetime) -> bool:
        n = self.items.get(notification_id)
        if not n:
            return False
        self.items[notification_id] = Notification(
            notification_id=n.notification_id,
            student_id=n.student_id,
            student_name=n.student_name,
            kind=n.kind,
            message=n.message,
            consecutive_absent_days=n.consecutive_absent_days,
            status=NotificationStatus.SENT,
            sent_at=sent_at,
            created_at=n.created_at,
        )
        return True

    def count_pending(self) -> int:
        return sum(1 for n in self.items.values() if n.status == NotificationStatus.PENDING)

    def purge_student(self, student_id: str) -> None:
        for key in [k for k, n in self.items.items() if n.student_id == student_id]:
            del self.items[key]


class InMemoryStudents:
    def __init__(self, cascade=()):
        self.by_id: dict[str, Student] = {}
        self.cascade = list(cascade)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda s: s.name)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self.by_id.get(student_id)

    def get_by_card_id(self, card_id: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.card_id == card_id), None)

    def create(self, student: Student) -> None:
        if self.get_by_card_id(student.card_id):
            raise DuplicateIdentifierError(f"Card ID {student.card_id} is already assigned to another student")
        self.by_id[student.student_id] = student

    def update(self, student: Student) -> bool:
        if student.student_id not in self.by_id:
            return False
        self.by_id[student.student_id] = student
        return True

    def delete_by_id(self, student_id: str) -> bool:
        if self.by_id.pop(student_id, None) is None:
            return False
        for repo in self.cascade:
            repo.purge_student(student_id)
        return True

    def count(self) -> int:
        return len(self.by_id)


class InMemoryReports:
    def __init__(self):
        self.by_date: dict[date, DailyReport] = {}

    def get_for_date(self, report_date: date) -> Optional[DailyReport]:
        return self.by_date.get(report_date)

    def list_all(self):
        return sorted(self.by_date.values(), key=lambda r: r.report_date, reverse=True)

    def last_day_number(self) -> int:
        return max((r.day_number for r in self.by_date.values()), default=0)

    def create(self, report: DailyReport) -> bool:
        if report.report_date in self.by_date:
            return False
        self.by_date[report.report_date] = report
        return True


def make_student(student_id: str, name: str, card_id: str, student_class: str = "Grade 5A") -> Student:
    return Student(
        student_id=student_id,
        name=name,
        card_id=card_id,
        student_class=student_class,
        parent_phone="+1234567890",
        parent_email=f"parent.{student_id}@email.com",
    )


def make_mark(student: Student, mark_date: date, status: AttendanceStatus, *, auto_marked: bool = False) -> AttendanceMark:
    return AttendanceMark(
        mark_id=f"{student.student_id}-{mark_date.isoformat()}",
        student_id=student.student_id,
        student_name=student.name,
        card_id=student.card_id,
        mark_date=mark_date,
        mark_time=START.time(),
        status=status,
        auto_marked=auto_marked,
    )


@dataclass
class Env:
    clock: FakeClock
    jobs: ManualJobScheduler
    students: InMemoryStudents
    attendance: InMemoryAttendance
    notifications: InMemoryNotifications
    reports: InMemoryReports
    container: object = field(default=None)

    def add(self, student: Student) -> Student:
        self.students.by_id[student.student_id] = student
        return student


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def jobs(clock) -> ManualJobScheduler:
    return ManualJobScheduler(clock)


@pytest.fixture
def env(clock, jobs) -> Env:
    students = InMemoryStudents()
    attendance = InMemoryAttendance(
        class_lookup=lambda sid: students.by_id[sid].student_class if sid in students.by_id else None
    )
    notifications = InMemoryNotifications(student_lookup=students.get_by_id)
    students.cascade = [attendance, notifications]
    reports = InMemoryReports()

    e = Env(clock=clock, jobs=jobs, students=students, attendance=attendance, notifications=notifications, reports=reports)
    e.container = wire_container(
        students_repo=students,
        attendance_repo=attendance,
        notifications_repo=notifications,
        reports_repo=reports,
        jobs=jobs,
        attendance_window_seconds=WINDOW_SECONDS,
        day_duration_seconds=DAY_SECONDS,
        clock=clock,
    )
    return e
