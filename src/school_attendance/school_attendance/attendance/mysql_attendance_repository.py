from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyMarkedError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from .model import AttendanceMark, AttendanceRow
from .repository import AttendanceRepository

_COLUMNS = "a.id, a.student_id, a.student_name, a.card_id, a.date, a.timestamp, a.status, a.auto_marked"


def _to_mark(r: dict) -> AttendanceMark:
    return AttendanceMark(
        mark_id=str(r["id"]),
        student_id=str(r["student_id"]),
        student_name=r["student_name"],
        card_id=r["card_id"],
        mark_date=r["date"],
        mark_time=normalize_mysql_time(r["timestamp"]),
        status=AttendanceStatus(r["status"]),
        auto_marked=bool(r.get("auto_marked")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: str, mark_date: date) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.student_id=%s AND a.date=%s",
                (student_id, mark_date),
            )
            r = fetchone(cur)
            return _to_mark(r) if r else None

    def create_mark(self, mark: AttendanceMark) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(id, student_id, student_name, card_id, date, timestamp, status, auto_marked)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        mark.mark_id,
                        mark.student_id,
                        mark.student_name,
                        mark.card_id,
                        mark.mark_date,
                        mark.mark_time,
                        mark.status.value,
                        bool(mark.auto_marked),
                    ),
                )
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise AlreadyMarkedError(
                    f"Attendance already recorded today for {mark.student_name}"
                ) from exc
            raise

    def history_between(self, student_id: str, start_date: date, end_date: date) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.student_id=%s AND a.date BETWEEN %s AND %s
                ORDER BY a.date DESC
                """,
                (student_id, start_date, end_date),
            )
            return [_to_mark(r) for r in fetchall(cur)]

    def list_for_date(self, mark_date: date) -> Sequence[AttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, s.class
                FROM attendance a
                JOIN students s ON a.student_id = s.id
                WHERE a.date = %s
                ORDER BY a.timestamp DESC
                """,
                (mark_date,),
            )
            return [AttendanceRow(mark=_to_mark(r), student_class=r.get("class")) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, s.class
                FROM attendance a
                JOIN students s ON a.student_id = s.id
                ORDER BY a.date DESC, a.timestamp DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [AttendanceRow(mark=_to_mark(r), student_class=r.get("class")) for r in fetchall(cur)]

    def count_by_status(self, mark_date: date) -> Mapping[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, COUNT(*) AS count FROM attendance WHERE date=%s GROUP BY status",
                (mark_date,),
            )
            counts = {status: 0 for status in AttendanceStatus}
            for r in fetchall(cur):
                counts[AttendanceStatus(r["status"])] = int(r["count"])
            return counts
