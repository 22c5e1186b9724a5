from __future__ import annotations

import itertools
import logging
import threading
import uuid
from datetime import timedelta

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from ..attendance.model import AttendanceMark
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, now_local
from ..core.constants import ABSENCE_JOB_PREFIX, NOTIFICATION_THRESHOLD
from ..core.enums import AttendanceStatus, NotificationKind, NotificationStatus
from ..core.exceptions import AlreadyMarkedError
from ..notifications.model import Notification, consecutive_absence_message
from ..notifications.repository import NotificationRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from .streak import ConsecutiveAbsenceEvaluator

logger = logging.getLogger(__name__)


class AbsenceScheduler:
    """Owns one cancellable absence countdown per student.

    Each countdown is a one-shot APScheduler job that fires after the attendance window.
    When it fires and the student still has no mark for the day, an auto-marked absence is
    written and, if the absence streak reaches the threshold, a parent notification is queued.

    The student -> job map is private and every mutation happens under one lock. Cancelling a
    job that has already started running does not stop it; the existence check (and the
    store's unique key) inside the expiry keeps a late expiry from double-writing.

    ``roster_lock`` serializes roster changes with timer (re)arming: whoever adds or removes a
    student, reloads the roster for a new day, or runs an expiry holds it, so a timer is never
    armed for a student deleted after the roster was read. An expiry only writes while its job
    is still the student's current timer and the student still exists.
    """

    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceRepository,
        notifications: NotificationRepository,
        evaluator: ConsecutiveAbsenceEvaluator,
        jobs: BaseScheduler,
        *,
        window_seconds: float,
        clock: Clock = now_local,
        notification_threshold: int = NOTIFICATION_THRESHOLD,
    ):
        self._students = students
        self._attendance = attendance
        self._notifications = notifications
        self._evaluator = evaluator
        self._jobs = jobs
        self._window = timedelta(seconds=float(window_seconds))
        self._clock = clock
        self._threshold = int(notification_threshold)

        self.roster_lock = threading.RLock()
        self._lock = threading.Lock()
        self._timers: dict[str, str] = {}
        self._job_seq = itertools.count(1)

    def arm(self, student: Student) -> None:
        """(Re)start the student's countdown; any previous one is cancelled first."""
        with self._lock:
            self._cancel_locked(student.student_id)
            job_id = f"{ABSENCE_JOB_PREFIX}-{student.student_id}-{next(self._job_seq)}"
            self._jobs.add_job(
                self._expire,
                "date",
                run_date=self._clock() + self._window,
                args=[student, job_id],
                id=job_id,
                misfire_grace_time=None,
            )
            self._timers[student.student_id] = job_id

    def cancel(self, student_id: str) -> None:
        with self._lock:
            self._cancel_locked(student_id)

    def cancel_all(self) -> None:
        with self._lock:
            for student_id in list(self._timers):
                self._cancel_locked(student_id)

    def active_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def is_armed(self, student_id: str) -> bool:
        with self._lock:
            return student_id in self._timers

    def _cancel_locked(self, student_id: str) -> None:
        job_id = self._timers.pop(student_id, None)
        if job_id is None:
            return
        try:
            self._jobs.remove_job(job_id)
        except JobLookupError:
            # Already fired (or firing): the expiry body guards itself.
            pass

    def _release(self, student_id: str, job_id: str) -> None:
        with self._lock:
            if self._timers.get(student_id) == job_id:
                del self._timers[student_id]

    def _is_current(self, student_id: str, job_id: str) -> bool:
        with self._lock:
            return self._timers.get(student_id) == job_id

    def _expire(self, armed: Student, job_id: str) -> None:
        logger.info("Absence window expired for %s, marking absent", armed.name)
        try:
            with self.roster_lock:
                if not self._is_current(armed.student_id, job_id):
                    logger.debug("Timer %s was cancelled before it ran, expiry discarded", job_id)
                    return
                self._record_absence(armed.student_id)
        except Exception:
            # Nobody waits on a background expiry: log it and leave the day unrecorded.
            logger.exception("Failed to mark %s absent", armed.name)
        finally:
            self._release(armed.student_id, job_id)

    def _record_absence(self, student_id: str) -> None:
        student = self._students.get_by_id(student_id)
        if student is None:
            logger.info("Student %s no longer exists, expiry discarded", student_id)
            return

        now = self._clock()
        today = now.date()

        if self._attendance.get_for_student_and_date(student.student_id, today):
            logger.debug("%s already has attendance for %s, expiry discarded", student.name, today)
            return

        mark = AttendanceMark(
            mark_id=str(uuid.uuid4()),
            student_id=student.student_id,
            student_name=student.name,
            card_id=student.card_id,
            mark_date=today,
            mark_time=now.time().replace(microsecond=0),
            status=AttendanceStatus.ABSENT,
            auto_marked=True,
        )
        try:
            self._attendance.create_mark(mark)
        except AlreadyMarkedError:
            logger.info("%s was marked concurrently for %s, expiry discarded", student.name, today)
            return

        streak = self._evaluator.streak(student.student_id, today)
        if streak >= self._threshold:
            self._notifications.create(
                Notification(
                    notification_id=str(uuid.uuid4()),
                    student_id=student.student_id,
                    student_name=student.name,
                    kind=NotificationKind.CONSECUTIVE_ABSENCE,
                    message=consecutive_absence_message(student.name, streak),
                    consecutive_absent_days=streak,
                    status=NotificationStatus.PENDING,
                )
            )
            logger.info("Queued absence notification for %s (%d consecutive days)", student.name, streak)
