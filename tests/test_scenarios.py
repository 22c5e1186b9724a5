from __future__ import annotations

import time

from apscheduler.schedulers.background import BackgroundScheduler

from conftest import InMemoryAttendance, InMemoryNotifications, InMemoryReports, InMemoryStudents, make_student

from school_attendance.container import wire_container
from school_attendance.core.enums import AttendanceStatus


def test_alice_checks_in_bob_times_out(env):
    # One "unit" of time is the 60 second attendance window.
    env.add(make_student("alice", "Alice", "C1"))
    env.add(make_student("bob", "Bob", "C2"))
    c = env.container

    c.day_cycle.start()
    assert c.absence_scheduler.active_count() == 2

    env.jobs.advance(30)
    c.attendance_service.check_in("C1")
    [alice_mark] = env.attendance.for_student("alice")
    assert alice_mark.status == AttendanceStatus.PRESENT
    assert alice_mark.auto_marked is False
    assert not c.absence_scheduler.is_armed("alice")

    env.jobs.advance(30)
    [bob_mark] = env.attendance.for_student("bob")
    assert bob_mark.status == AttendanceStatus.ABSENT
    assert bob_mark.auto_marked is True
    assert c.absence_scheduler.active_count() == 0
    assert len(env.attendance.for_student("alice")) == 1


def _wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def test_real_background_scheduler_marks_absent_and_shuts_down():
    students = InMemoryStudents()
    attendance = InMemoryAttendance()
    notifications = InMemoryNotifications()
    students.by_id["s1"] = make_student("s1", "Alice", "C1")
    students.by_id["s2"] = make_student("s2", "Bob", "C2")

    jobs = BackgroundScheduler()
    container = wire_container(
        students_repo=students,
        attendance_repo=attendance,
        notifications_repo=notifications,
        reports_repo=InMemoryReports(),
        jobs=jobs,
        attendance_window_seconds=0.2,
        day_duration_seconds=60,
    )
    jobs.start()
    try:
        container.day_cycle.start()
        container.attendance_service.check_in("C1")

        assert _wait_until(lambda: container.absence_scheduler.active_count() == 0)
        assert [m.status for m in attendance.for_student("s1")] == [AttendanceStatus.PRESENT]
        assert [m.status for m in attendance.for_student("s2")] == [AttendanceStatus.ABSENT]
        container.day_cycle.shutdown()
        assert jobs.get_jobs() == []
    finally:
        container.day_cycle.shutdown()
        jobs.shutdown(wait=True)
