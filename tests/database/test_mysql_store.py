from __future__ import annotations

from datetime import date, time, timedelta

import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from conftest import make_mark, make_student

from school_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from school_attendance.core.enums import AttendanceStatus
from school_attendance.core.exceptions import AlreadyMarkedError, DuplicateIdentifierError, StoreUnavailableError
from school_attendance.database.bootstrap import iter_sql_statements
from school_attendance.database.mysql_base import db_cursor, normalize_mysql_time
from school_attendance.students.mysql_student_repository import MySQLStudentRepository


class FakeCursor:
    def __init__(self, error=None, rows=None):
        self.error = error
        self.rows = rows or []
        self.executed = []
        self.rowcount = 0

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def _duplicate_key():
    return mysql_errors.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(8, 30)) == time(8, 30)
    assert normalize_mysql_time(timedelta(hours=8, minutes=30, seconds=5)) == time(8, 30, 5)
    assert normalize_mysql_time("08:30") == time(8, 30)
    with pytest.raises(ValueError):
        normalize_mysql_time("8")


def test_iter_sql_statements_skips_comments_and_quoted_semicolons():
    sql = "-- header\nCREATE TABLE a (x INT);\nINSERT INTO a VALUES ('x;y');\n"
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES ('x;y')"]


def test_db_cursor_commits_and_closes():
    conn = FakeConnection(FakeCursor())
    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")
    assert conn.committed and conn.closed


def test_db_cursor_maps_connect_failure():
    factory = FakeFactory(connect_error=mysql_errors.InterfaceError(msg="Can't connect"))
    with pytest.raises(StoreUnavailableError):
        with db_cursor(factory):
            pass


def test_db_cursor_maps_operational_error_and_rolls_back():
    conn = FakeConnection(FakeCursor(error=mysql_errors.OperationalError(msg="Lost connection")))
    with pytest.raises(StoreUnavailableError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("SELECT 1")
    assert conn.rolled_back and conn.closed


def test_attendance_duplicate_key_is_already_marked():
    conn = FakeConnection(FakeCursor(error=_duplicate_key()))
    repo = MySQLAttendanceRepository(FakeFactory(conn))
    mark = make_mark(make_student("s1", "Alice", "C1"), date(2026, 3, 2), AttendanceStatus.PRESENT)

    with pytest.raises(AlreadyMarkedError):
        repo.create_mark(mark)


def test_attendance_other_integrity_errors_propagate():
    conn = FakeConnection(FakeCursor(error=mysql_errors.IntegrityError(msg="FK", errno=errorcode.ER_NO_REFERENCED_ROW_2)))
    repo = MySQLAttendanceRepository(FakeFactory(conn))
    mark = make_mark(make_student("s1", "Alice", "C1"), date(2026, 3, 2), AttendanceStatus.ABSENT)

    with pytest.raises(mysql_errors.IntegrityError):
        repo.create_mark(mark)


def test_student_duplicate_card_is_duplicate_identifier():
    conn = FakeConnection(FakeCursor(error=_duplicate_key()))
    repo = MySQLStudentRepository(FakeFactory(conn))

    with pytest.raises(DuplicateIdentifierError):
        repo.create(make_student("s1", "Alice", "C1"))


def test_attendance_row_mapping():
    row = {
        "id": "m1",
        "student_id": "s1",
        "student_name": "Alice",
        "card_id": "C1",
        "date": date(2026, 3, 2),
        "timestamp": timedelta(hours=8, minutes=5),
        "status": "absent",
        "auto_marked": 1,
    }
    repo = MySQLAttendanceRepository(FakeFactory(FakeConnection(FakeCursor(rows=[row]))))

    mark = repo.get_for_student_and_date("s1", date(2026, 3, 2))

    assert mark.mark_time == time(8, 5)
    assert mark.status == AttendanceStatus.ABSENT
    assert mark.auto_marked is True
